"""
Natural Order Module - Hierarchical Natural Sorting of Frame Names

Orders file-like identifiers so that numbers embedded in the names compare
by value ("frame_9" before "frame_10") and shallower path components
dominate deeper ones ("a/file10" before "b/file1").

DESIGN CONSTRAINTS:
- Pure functions, no hidden state
- Deterministic: stable sorts only, ties keep input order
- All input validation happens before any sorting

ALGORITHM:
1. Decompose every item into parent components, base name and extension
2. Optionally drop "." and ".." entries
3. Build one key column per hierarchy level, parents padded with ''
4. Stable sort column by column, deepest key first, shallowest last
"""

import os
import re
from dataclasses import dataclass
from decimal import Decimal
from functools import cmp_to_key
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Sequence, Tuple, Union

from framesync.errors import ConfigError, ValidationError


# =============================================================================
# OPTIONS
# =============================================================================

OPTION_FLAGS: Tuple[str, ...] = (
    'rmdot',       # remove "." and ".." entries
    'noext',       # treat names as directories: extension stays in the name
    'xpath',       # ignore the parent path, compare file names only
    'ascend',
    'descend',
    'ignorecase',
    'matchcase',
    'signed',      # "+" / "-" prefixes belong to the number
    'decimal',     # "1.5" is one number
)

EXCLUSIVE_OPTIONS: Tuple[Tuple[str, str], ...] = (
    ('ascend', 'descend'),
    ('ignorecase', 'matchcase'),
)

DOT_ENTRIES: Tuple[str, ...] = ('.', '..')

NameItem = Union[str, Mapping[str, str]]


@dataclass(frozen=True)
class SortOptions:
    """
    Resolved natural sort configuration.

    Attributes:
        remove_dot_entries: Drop items whose base name is "." or ".."
        treat_as_directory: Keep the extension as part of the base name
        path_only: Compare base names (and extensions) only, ignore parents
        descending: Reverse the order at every level
        match_case: Compare text tokens case-sensitively
        signed: Parse a leading "+"/"-" as part of numeric tokens
        decimal: Parse decimal fractions as single numeric tokens
    """
    remove_dot_entries: bool = False
    treat_as_directory: bool = False
    path_only: bool = False
    descending: bool = False
    match_case: bool = False
    signed: bool = False
    decimal: bool = False


def parse_sort_options(options: Sequence) -> SortOptions:
    """
    Resolve text flags into a SortOptions instance.

    A single SortOptions instance is passed through unchanged.

    Raises:
        ConfigError: On duplicate, conflicting or unknown flags
    """
    if len(options) == 1 and isinstance(options[0], SortOptions):
        return options[0]

    seen = []
    for option in options:
        if not isinstance(option, str):
            raise ConfigError(f"Sort options must be text flags, got {option!r}")
        flag = option.lower()
        if flag not in OPTION_FLAGS:
            raise ConfigError(f"Unknown sort option: {option!r}", option=option)
        if flag in seen:
            raise ConfigError(f"Sort option given more than once: {option!r}", option=option)
        seen.append(flag)

    for first, second in EXCLUSIVE_OPTIONS:
        if first in seen and second in seen:
            raise ConfigError(
                f"Sort options {first!r} and {second!r} are mutually exclusive",
                option=second
            )

    return SortOptions(
        remove_dot_entries='rmdot' in seen,
        treat_as_directory='noext' in seen,
        path_only='xpath' in seen,
        descending='descend' in seen,
        match_case='matchcase' in seen,
        signed='signed' in seen,
        decimal='decimal' in seen,
    )


# =============================================================================
# TOKENIZATION
# =============================================================================

@dataclass(frozen=True)
class Token:
    """Maximal run of digit or non-digit characters."""
    text: str
    value: Optional[Union[int, Decimal]] = None

    @property
    def is_number(self) -> bool:
        return self.value is not None


def _number_pattern(signed: bool = False, decimal: bool = False) -> re.Pattern:
    number = r'\d+(?:\.\d+)?' if decimal else r'\d+'
    if signed:
        number = r'[-+]?' + number
    return re.compile(f'({number})')


_PATTERNS = {
    (signed, decimal): _number_pattern(signed, decimal)
    for signed in (False, True)
    for decimal in (False, True)
}


def _parse_number(text: str) -> Union[int, Decimal]:
    if '.' in text:
        return Decimal(text)
    return int(text)


def split_tokens(text: str, signed: bool = False, decimal: bool = False) -> List[Token]:
    """
    Split text into alternating numeric and non-numeric tokens.

    Concatenating the token texts reproduces the input exactly.

    Examples:
        split_tokens('frame_010.tif') -> [Token('frame_'), Token('010', 10), Token('.tif')]
    """
    pattern = _PATTERNS[(signed, decimal)]
    tokens = []
    # re.split with a capturing group puts the numbers at odd positions
    for i, part in enumerate(pattern.split(text)):
        if not part:
            continue
        if i % 2 == 1:
            tokens.append(Token(part, _parse_number(part)))
        else:
            tokens.append(Token(part))
    return tokens


def _compare_values(a, b) -> int:
    return (a > b) - (a < b)


def compare_tokens(a: List[Token], b: List[Token], match_case: bool = False) -> int:
    """
    Three-way comparison of two token lists.

    Numbers compare by value and sort before text; text compares
    case-insensitively unless match_case is set; when one list is a
    prefix of the other, the shorter list sorts first.
    """
    for token_a, token_b in zip(a, b):
        if token_a.is_number and token_b.is_number:
            result = _compare_values(token_a.value, token_b.value)
        elif token_a.is_number:
            result = -1
        elif token_b.is_number:
            result = 1
        elif match_case:
            result = _compare_values(token_a.text, token_b.text)
        else:
            result = _compare_values(token_a.text.casefold(), token_b.text.casefold())
        if result:
            return result
    return _compare_values(len(a), len(b))


def compare_natural(a: str, b: str, *options) -> int:
    """Natural three-way comparison of two strings."""
    opts = parse_sort_options(options)
    return compare_tokens(
        split_tokens(a, opts.signed, opts.decimal),
        split_tokens(b, opts.signed, opts.decimal),
        opts.match_case
    )


# =============================================================================
# NAME DECOMPOSITION
# =============================================================================

@dataclass(frozen=True)
class NameRecord:
    """
    Hierarchical name split into parent components, base name and extension.

    sep.join(parents + (name + ext,)) reproduces the identifier.
    """
    parents: Tuple[str, ...]
    name: str
    ext: str = ''
    sep: str = os.sep

    @property
    def basename(self) -> str:
        return self.name + self.ext

    @property
    def identifier(self) -> str:
        return self.sep.join(self.parents + (self.basename,))


def _split_extension(basename: str) -> Tuple[str, str]:
    if basename in DOT_ENTRIES:
        return basename, ''
    dot = basename.rfind('.')
    if dot < 0:
        return basename, ''
    return basename[:dot], basename[dot:]


def decompose_name(
    item: NameItem,
    treat_as_directory: bool = False,
    sep: str = os.sep
) -> NameRecord:
    """
    Decompose a plain identifier or a {'name', 'folder'} record.

    For records the separator is only honored inside 'folder'; a separator
    inside 'name' is kept as part of the base name.
    """
    if isinstance(item, str):
        cut = item.rfind(sep)
        if cut < 0:
            parents: Tuple[str, ...] = ()
            basename = item
        else:
            parents = tuple(item[:cut].split(sep))
            basename = item[cut + 1:]
    else:
        folder = item['folder']
        parents = tuple(folder.split(sep)) if folder else ()
        basename = item['name']

    if treat_as_directory:
        return NameRecord(parents, basename, '', sep)

    name, ext = _split_extension(basename)
    return NameRecord(parents, name, ext, sep)


def validate_names(names) -> None:
    """
    Check the structure of a name list before any sorting.

    Raises:
        ValidationError: If names is not a list/tuple, or an item is neither
            a string nor a mapping with string 'name' and 'folder' fields
    """
    if not isinstance(names, (list, tuple)):
        raise ValidationError(
            f"Names must be a list or tuple, got {type(names).__name__}"
        )

    for i, item in enumerate(names):
        if isinstance(item, str):
            continue
        if not isinstance(item, Mapping):
            raise ValidationError(
                f"Item {i} must be a string or a name record, got {type(item).__name__}",
                index=i
            )
        for field in ('name', 'folder'):
            if field not in item:
                raise ValidationError(
                    f"Item {i} is missing the required field {field!r}",
                    field=field,
                    index=i
                )
            if not isinstance(item[field], str):
                raise ValidationError(
                    f"Field {field!r} of item {i} must be a string, "
                    f"got {type(item[field]).__name__}",
                    field=field,
                    index=i
                )


# =============================================================================
# SORTING
# =============================================================================

def stable_sort_by_levels(
    levels: Sequence[Sequence],
    compare: Callable[[object, object], int],
    reverse: bool = False,
    order: Optional[List[int]] = None
) -> List[int]:
    """
    Multi-key stable sort built from single-key stable sorts.

    levels[0] is the most significant key column. Columns are sorted from
    the last to the first, each pass only reordering within the order left
    by the previous one.

    Parameters:
        levels: Key columns, all of equal length
        compare: Three-way comparator applied to two entries of one column
        reverse: Descending order at every level
        order: Initial order (default: identity)

    Returns:
        Permutation of positions
    """
    if order is None:
        n_items = len(levels[0]) if levels else 0
        order = list(range(n_items))

    for column in reversed(levels):
        key = cmp_to_key(lambda i, j, column=column: compare(column[i], column[j]))
        order = sorted(order, key=key, reverse=reverse)

    return order


def _build_levels(records: List[NameRecord], opts: SortOptions) -> List[List[str]]:
    levels: List[List[str]] = []

    if not opts.path_only:
        depth = max((len(r.parents) for r in records), default=0)
        for level in range(depth):
            levels.append([
                r.parents[level] if level < len(r.parents) else ''
                for r in records
            ])

    levels.append([r.name for r in records])
    if not opts.treat_as_directory:
        levels.append([r.ext for r in records])

    return levels


def natural_sort(names: Sequence[NameItem], *options) -> Tuple[List[NameItem], List[int]]:
    """
    Sort hierarchical names in natural order.

    CONTRACT:
    - Input: list of strings or {'name', 'folder'} mappings
    - Output: (ordered items, permutation of input positions)
    - ordered == [names[i] for i in permutation]
    - Stable: equal-ranked items keep their input order
    - Idempotent: a sorted list yields the identity permutation

    Parameters:
        names: Items to sort
        *options: Text flags ('rmdot', 'noext', 'xpath', 'ascend', 'descend',
            'ignorecase', 'matchcase', 'signed', 'decimal') or a single
            SortOptions instance

    Returns:
        Tuple of (ordered_items, permutation)

    Raises:
        ValidationError: Malformed names
        ConfigError: Duplicate, conflicting or unknown options
    """
    validate_names(names)
    opts = parse_sort_options(options)

    positions = list(range(len(names)))
    records = [decompose_name(item, opts.treat_as_directory) for item in names]

    if opts.remove_dot_entries:
        positions = [i for i in positions if records[i].basename not in DOT_ENTRIES]

    if not positions:
        return [], []

    kept = [records[i] for i in positions]
    levels = [
        [split_tokens(text, opts.signed, opts.decimal) for text in column]
        for column in _build_levels(kept, opts)
    ]

    def compare(a, b):
        return compare_tokens(a, b, opts.match_case)

    local_order = stable_sort_by_levels(levels, compare, reverse=opts.descending)
    permutation = [positions[i] for i in local_order]

    return [names[i] for i in permutation], permutation


def list_frame_files(
    directory: Union[str, Path],
    extensions: Sequence[str] = ('.tif', '.tiff'),
    recursive: bool = False
) -> List[Path]:
    """
    List frame files of a directory in natural order.

    Parameters:
        directory: Directory to scan
        extensions: Accepted suffixes (case-insensitive)
        recursive: Descend into subdirectories

    Returns:
        Naturally ordered list of paths
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Frame directory not found: {directory}")

    suffixes = {ext.lower() for ext in extensions}
    candidates = directory.rglob('*') if recursive else directory.glob('*')
    frame_files = [
        str(p) for p in candidates
        if p.is_file() and p.suffix.lower() in suffixes
    ]

    ordered, _ = natural_sort(frame_files)
    return [Path(p) for p in ordered]
