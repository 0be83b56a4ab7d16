from sshstore.base import (
    AgentBase,
    ClipboardBase,
    EncryptorBase,
    PrompterBase,
    QrRendererBase,
    SelectorBase,
    VersionerBase,
)
from sshstore.config import Settings
from sshstore.errors import CollaboratorError, NotFoundError, OperatorAbort, PassSshError, UsageError
from sshstore.orchestrator import KeyStoreOrchestrator
from sshstore.store import KeyEntry, KeyStore

__all__ = [
    "AgentBase",
    "ClipboardBase",
    "EncryptorBase",
    "PrompterBase",
    "QrRendererBase",
    "SelectorBase",
    "VersionerBase",
    "Settings",
    "PassSshError",
    "UsageError",
    "NotFoundError",
    "CollaboratorError",
    "OperatorAbort",
    "KeyStoreOrchestrator",
    "KeyEntry",
    "KeyStore",
]
