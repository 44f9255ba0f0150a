class MessageExtractorError(Exception):
    pass


class ConfigError(MessageExtractorError):
    pass


class SourceParseError(MessageExtractorError):
    def __init__(self, path, line, description):
        super().__init__(f"Cannot parse {path}:{line}: {description}")
        self.path = path
        self.line = line
        self.description = description


class CatalogueParseError(MessageExtractorError):
    def __init__(self, path, reason):
        super().__init__(f"Cannot parse catalogue {path}: {reason}")
        self.path = path
        self.reason = reason


class IdentifierCollisionError(MessageExtractorError):
    """Two different (message, context) pairs share one message id."""

    def __init__(self, id, first, second):
        super().__init__(
            f"Message id \"{id}\" is shared by \"{first.message}\" "
            f"and \"{second.message}\"")
        self.id = id
        self.first = first
        self.second = second
