import contextlib
import io
import os
import pathlib
from typing import BinaryIO, Iterator, Union

import Bio.bgzf

try:
    from isal import igzip as gzip
except ImportError:
    import gzip

try:
    import bz2
except ImportError as err:
    bz2 = err

try:
    import lzma
except ImportError as err:
    lzma = err


#: Suffixes of block-compressed files, in the order they are tested.
BLOCK_COMPRESSED_EXTENSIONS = (".gz", ".gzip", ".bgz", ".bgzf")

_BZ2_MAGIC = b"BZh"
_GZIP_MAGIC = b"\x1f\x8b"
_XZ_MAGIC = b"\xfd7zXZ"
_BGZF_MAGIC = b"\x1f\x8b\x08\x04"
_BGZF_SUBFIELD = b"BC"


def strip_block_compressed_extension(path: Union[str, os.PathLike]) -> str:
    """Remove one block-compression suffix from a file name, if present.
    """
    name = os.fspath(path)
    for ext in BLOCK_COMPRESSED_EXTENSIONS:
        if name.endswith(ext):
            return name[: -len(ext)]
    return name


def is_bgzf(peek: bytes) -> bool:
    """Check whether a header starts a BGZF block.

    BGZF blocks are gzip members with the ``FEXTRA`` flag set and a
    ``BC`` extra subfield storing the compressed block size.
    """
    return peek.startswith(_BGZF_MAGIC) and peek[12:14] == _BGZF_SUBFIELD


@contextlib.contextmanager
def zopen(path: Union[str, pathlib.Path, BinaryIO]) -> Iterator[BinaryIO]:
    """Open a file with optional compression in binary mode.

    BGZF files are opened with `Bio.bgzf.BgzfReader`, so that `tell`
    returns virtual offsets; other compressed files report offsets in
    the decompressed stream.

    Note:
        `Bio.bgzf.BgzfReader` does not support `read` without a size,
        read BGZF handles line by line or in bounded chunks.
    """
    with contextlib.ExitStack() as ctx:
        if isinstance(path, (str, pathlib.Path)):
            file = ctx.enter_context(open(path, "rb"))
        else:
            file = ctx.enter_context(io.BufferedReader(path))
        peek = file.peek()
        if is_bgzf(peek):
            file = ctx.enter_context(Bio.bgzf.BgzfReader(fileobj=file, mode="rb"))
        elif peek.startswith(_GZIP_MAGIC):
            file = ctx.enter_context(gzip.open(file, mode="rb"))
        elif peek.startswith(_BZ2_MAGIC):
            if isinstance(bz2, ImportError):
                raise RuntimeError("File compression is BZ2 but bz2 is not available") from bz2
            file = ctx.enter_context(bz2.open(file, mode="rb"))
        elif peek.startswith(_XZ_MAGIC):
            if isinstance(lzma, ImportError):
                raise RuntimeError("File compression is LZMA but lzma is not available") from lzma
            file = ctx.enter_context(lzma.open(file, mode="rb"))
        yield file
