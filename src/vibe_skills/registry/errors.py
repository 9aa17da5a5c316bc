class SkillsError(Exception):
    """Base class for every error raised by the registry and installer."""


class SkillNotFoundError(SkillsError):
    def __init__(self, name: str):
        super().__init__(f"skill not found: {name}")
        self.name = name


class SkillNotInstalledError(SkillsError):
    def __init__(self, name: str):
        super().__init__(f"skill not installed: {name}")
        self.name = name


class EmptyResultError(SkillsError):
    """A query that should have produced items produced none."""


class EmptyStackError(EmptyResultError):
    def __init__(self, stack: str):
        super().__init__(f"no skills found in stack: {stack}")
        self.stack = stack


class RegistryFetchError(SkillsError):
    """Fetching the index or a skill file failed. The cause is chained."""


class SkillIOError(SkillsError):
    """Reading, writing or deleting under the target directory failed."""


class CacheError(SkillsError):
    pass
