_DNA_TO_RNA = str.maketrans({"T": "U"})


def normalize_base(base_raw: str) -> str:
    """
    Upper-case a nucleotide character and map T->U so DNA input lays out like RNA.

    Parameters
    ----------
    base_raw : str
        Raw single-character nucleotide base.

    Returns
    -------
    str
        Normalized base. Inputs that are not single-character strings are
        returned untouched.
    """
    if isinstance(base_raw, str) and len(base_raw) == 1:
        return base_raw.upper().translate(_DNA_TO_RNA)
    return base_raw


def clean_sequence(raw_sequence: str) -> str:
    """
    Normalize a whole sequence string as typed or pasted by a user.

    All whitespace is removed, including line breaks inside wrapped FASTA
    bodies; the rest is upper-cased with T mapped to U. Cut markers and
    unknown characters pass through for the base parser to judge.

    Parameters
    ----------
    raw_sequence : str
        Sequence text.

    Returns
    -------
    str
        The cleaned sequence.
    """
    return "".join(raw_sequence.split()).upper().translate(_DNA_TO_RNA)
