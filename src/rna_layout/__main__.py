from rna_layout.scripts.layout_rna import main


if __name__ == '__main__':
    raise SystemExit(main())
