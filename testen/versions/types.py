class VersionError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class VersionContractError(VersionError, TypeError):
    def __init__(self, left: object, right: object):
        super().__init__(
            f"Versions must be strings, got {type(left).__name__} and {type(right).__name__}"
        )
        self.left = left
        self.right = right


class VersionFormatError(VersionError, ValueError):
    def __init__(self, version: str):
        super().__init__(f"Invalid version: {version!r}")
        self.version = version
