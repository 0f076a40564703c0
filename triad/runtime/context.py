"""
Runtime context: one fully wired engine with its collaborators.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from triad.core.crypto import JournalSigner
from triad.core.exceptions import ConfigError
from triad.journal.journal import EventJournal
from triad.ledger.wallets import Wallets
from triad.oracle.coordinator import FeeToken, RandomnessCoordinator
from triad.settlement.engine import SettlementEngine


DEFAULT_KEY_HASH = "0x6c3699283bda56ad74f6b855546325b68d482e983852a7a82979cc4807b641f4"
DEFAULT_FEE      = 100_000_000_000_000_000


@dataclass
class RuntimeContext:
    """Engine plus the wallets, fee token, coordinator and journal it talks to."""

    engine: SettlementEngine
    wallets: Wallets
    fee_token: FeeToken
    coordinator: RandomnessCoordinator
    journal: Optional[EventJournal] = None

    @classmethod
    def from_dict(cls, config: Dict[str, Any], base_dir: Optional[Path] = None) -> "RuntimeContext":
        """Build a context from an already-parsed config mapping."""
        if not isinstance(config, dict):
            raise ConfigError("Config root must be a mapping")

        engine_cfg = _section(config, "engine", required=True)
        oracle_cfg = _section(config, "oracle")
        journal_cfg = _section(config, "journal")

        address = _require(engine_cfg, "engine", "address")
        admin = _require(engine_cfg, "engine", "admin")

        fee = oracle_cfg.get("fee", DEFAULT_FEE)
        if not isinstance(fee, int) or fee < 0:
            raise ConfigError("oracle.fee must be a non-negative integer", {"fee": fee})

        wallets = Wallets()
        fee_token = FeeToken(oracle_cfg.get("fee_symbol", "LINK"))
        coordinator = RandomnessCoordinator(
            oracle_cfg.get("address", "vrf-coordinator"),
            fee_token,
        )
        engine = SettlementEngine(
            address=address,
            admin=admin,
            coordinator=coordinator,
            fee_token=fee_token,
            fee=fee,
            key_hash=oracle_cfg.get("key_hash", DEFAULT_KEY_HASH),
            transport=wallets,
        )

        journal = None
        if journal_cfg:
            base_dir = Path(base_dir or ".")
            journal_path = base_dir / _require(journal_cfg, "journal", "path")
            if "key" in journal_cfg:
                key_path = base_dir / journal_cfg["key"]
            else:
                key_path = journal_path / "journal.pem"
            signer = JournalSigner.load_or_generate(key_path)
            journal = EventJournal(signer, address, str(journal_path)).attach(engine)

        return cls(
            engine=engine,
            wallets=wallets,
            fee_token=fee_token,
            coordinator=coordinator,
            journal=journal,
        )

    @classmethod
    def from_config(cls, config_file: Path) -> "RuntimeContext":
        """
        Create runtime context from a YAML file.

        Relative journal paths resolve against the config file's directory.
        """
        config_file = Path(config_file)
        if not config_file.exists():
            raise ConfigError(f"Config file not found: {config_file}")

        with open(config_file, "r", encoding="utf-8") as f:
            try:
                config = yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise ConfigError(f"Invalid YAML in {config_file}: {exc}") from exc

        return cls.from_dict(config or {}, base_dir=config_file.parent)

    def __repr__(self) -> str:
        return (
            f"RuntimeContext("
            f"engine={self.engine.address!r}, "
            f"matches={len(self.engine.store)}, "
            f"available={self.engine.available_funds})"
        )


def _section(config: Dict[str, Any], name: str, required: bool = False) -> Dict[str, Any]:
    section = config.get(name)
    if section is None:
        if required:
            raise ConfigError(f"Missing config section '{name}'")
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"Config section '{name}' must be a mapping")
    return section


def _require(section: Dict[str, Any], name: str, key: str) -> Any:
    value = section.get(key)
    if value in (None, ""):
        raise ConfigError(f"Missing required key '{name}.{key}'")
    return value
