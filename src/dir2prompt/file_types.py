"""File category classification by extension.

Only files classified as code are aggregated into the export text; images, videos
and unclassified files are always left out regardless of their checkbox state.
"""

from dir2prompt.types import FileCategory

# Text formats included in exports
CODE_EXTENSIONS = frozenset(
    {
        "js",
        "ts",
        "tsx",
        "jsx",
        "json",
        "html",
        "css",
        "scss",
        "md",
        "py",
        "rs",
        "xml",
        "c",
        "cpp",
        "h",
        "qml",
        "qrc",
        "mo",
        "toml",
        "txt",
        "java",
        "kt",
        "kts",
        "proto",
        "gradle",
        "move",
    }
)

IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "webp", "svg"})

VIDEO_EXTENSIONS = frozenset({"mp4", "webm", "mov"})


def file_extension(name: str) -> str:
    """Return the lower-cased text after the last dot of ``name``.

    A name without a dot is its own extension, so ``Makefile`` yields ``makefile``.

    Example:
        >>> file_extension("App.TSX")
        'tsx'
        >>> file_extension("archive.tar.gz")
        'gz'
    """
    return name.rsplit(".", 1)[-1].lower()


def classify(name: str) -> FileCategory:
    """Classify a file name into a content category.

    Example:
        >>> classify("main.py")
        <FileCategory.CODE: 'code'>
        >>> classify("logo.png").value
        'image'
        >>> classify("data.bin").value
        'unsupported'
    """
    extension = file_extension(name)
    if extension in CODE_EXTENSIONS:
        return FileCategory.CODE
    if extension in IMAGE_EXTENSIONS:
        return FileCategory.IMAGE
    if extension in VIDEO_EXTENSIONS:
        return FileCategory.VIDEO
    return FileCategory.UNSUPPORTED


def is_code_file(name: str) -> bool:
    return classify(name) is FileCategory.CODE
