class TokenizerNotAvailableError(Exception):
    """
    Exception raised when attempting to use exact token counting without the required tokenizer package.

    This exception is raised when the `tiktoken` package is not installed but a tokenizer model
    was requested. The tiktoken package is an optional dependency that must be explicitly
    installed using the 'token_counting' extra.

    Attributes:
        message (str): Detailed error message including installation instructions.

    Example:
        >>> error = TokenizerNotAvailableError()
        >>> str(error).startswith('Tokenizer (tiktoken) is not installed')
        True
    """

    def __init__(self, message: str = "Tokenizer (tiktoken) is not installed.") -> None:
        """
        Initialize the exception with an informative error message.

        Args:
            message (str, optional): Base error message. Defaults to "Tokenizer (tiktoken) is not installed."
                Installation instructions will be appended to this message.
        """
        self.message = (
            f"{message} To enable exact token counting, install dir2prompt with the 'token_counting' "
            "extra: 'pip install dir2prompt[token_counting]'."
        )
        super().__init__(self.message)


class TokenizationError(Exception):
    """
    Exception raised when token counting fails during execution.

    Example:
        >>> error = TokenizationError("Failed to tokenize: invalid input")
        >>> str(error)
        'Failed to tokenize: invalid input'
    """

    pass


class UnsupportedRootError(Exception):
    """
    Exception raised when the item chosen as the root of a session is not a directory.

    No tree state is modified when this exception is raised.

    Attributes:
        root (str): Description of the rejected root.

    Example:
        >>> error = UnsupportedRootError("notes.txt")
        >>> str(error)
        'Root must be a directory: notes.txt'
    """

    def __init__(self, root: str) -> None:
        self.root = root
        super().__init__(f"Root must be a directory: {root}")


class EntryNotFoundError(KeyError):
    """
    Exception raised when an entry id does not exist in the selection tree.

    Attributes:
        entry_id (str): The id that could not be resolved.
    """

    def __init__(self, entry_id: str) -> None:
        self.entry_id = entry_id
        super().__init__(entry_id)

    def __str__(self) -> str:
        return f"No entry with id '{self.entry_id}' in the selection tree"


class UnknownRuleError(KeyError):
    """
    Exception raised when an exclusion rule name is not registered.

    Attributes:
        rule_name (str): The unknown rule name.
    """

    def __init__(self, rule_name: str) -> None:
        self.rule_name = rule_name
        super().__init__(rule_name)

    def __str__(self) -> str:
        return f"Unknown exclusion rule: '{self.rule_name}'"


class FileTooLargeError(OSError):
    """
    Exception raised when a file exceeds the configured maximum readable size.

    The check is performed on the file's size before any content is read.

    Attributes:
        file_path (str): Path of the rejected file.
        size (int): Size of the file in bytes.
        max_size (int): Configured limit in bytes.

    Example:
        >>> error = FileTooLargeError("big.json", 2048, 1024)
        >>> str(error)
        'File is too large to read: big.json (2048 bytes, limit 1024 bytes)'
    """

    def __init__(self, file_path: str, size: int, max_size: int) -> None:
        self.file_path = file_path
        self.size = size
        self.max_size = max_size
        super().__init__(f"File is too large to read: {file_path} ({size} bytes, limit {max_size} bytes)")
