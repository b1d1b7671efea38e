"""Custom exceptions for the contract navigator."""


class ContractError(Exception):
    """Base exception for contract errors."""

    def __init__(self, message: str, source: str = "unknown") -> None:
        """Initialize error.

        Args:
            message: Error message
            source: Contract source or pipeline stage that failed
        """
        self.source = source
        super().__init__(f"[{source}] {message}")


class InvalidNameError(ContractError):
    """Raised when a contract name is not a bare `.json` file name."""

    def __init__(self, name: str, source: str = "unknown") -> None:
        """Initialize error.

        Args:
            name: Rejected contract name
            source: Contract source
        """
        self.name = name
        super().__init__(f"Contract must be .json: {name}", source=source)


class InvalidRoleError(ContractError):
    """Raised when a role is neither provider nor consumer."""

    def __init__(self, role: object) -> None:
        self.role = role
        super().__init__(f"Invalid kind: {role}", source="store")


class NotFoundError(ContractError):
    """Raised when no file or object backs a contract name."""

    def __init__(self, name: str, location: str, source: str = "unknown") -> None:
        """Initialize error.

        Args:
            name: Contract name
            location: Where the contract was looked up
            source: Contract source
        """
        self.name = name
        self.location = location
        super().__init__(f"Contract '{name}' not found at {location}", source=source)


class ParseError(ContractError):
    """Raised when contract content is not valid JSON."""

    def __init__(self, name: str, detail: str, source: str = "unknown") -> None:
        self.name = name
        self.detail = detail
        super().__init__(f"Contract '{name}' is not valid JSON: {detail}", source=source)


class ConfigError(ContractError):
    """Raised when required backend configuration is missing."""

    pass


class SourceDisabledError(ContractError):
    """Raised when a configured-off source is requested."""

    def __init__(self, source: str) -> None:
        super().__init__(f"{source.upper()} is not enabled.", source=source)


class UnknownSourceError(ContractError):
    """Raised for an unrecognized source tag."""

    def __init__(self, source: object) -> None:
        super().__init__(f"Unknown source: {source}", source="store")


class EmptyBodyError(ContractError):
    """Raised when a remote object is fetched with no content."""

    def __init__(self, bucket: str, key: str) -> None:
        self.bucket = bucket
        self.key = key
        super().__init__(f"Empty S3 body for s3://{bucket}/{key}", source="s3")


class ResolutionError(ContractError):
    """Raised when a spec cannot be fully dereferenced."""

    def __init__(self, message: str) -> None:
        super().__init__(message, source="resolver")


class DiffEngineError(ContractError):
    """Raised by the structural diff engine on unusable input."""

    def __init__(self, message: str) -> None:
        super().__init__(message, source="engine")


class DiffError(ContractError):
    """Raised when any stage of a diff fails."""

    def __init__(self, message: str) -> None:
        super().__init__(message, source="diff")
