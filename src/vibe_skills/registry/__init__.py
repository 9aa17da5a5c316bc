from .cache import RegistryCache
from .installer import SkillInstaller
from .providers import LocalSkillProvider, RemoteSkillProvider, SkillProvider

__all__ = ["RegistryCache", "SkillInstaller", "SkillProvider", "RemoteSkillProvider", "LocalSkillProvider"]
