import os
from dataclasses import dataclass
from typing import Dict, List, Optional

from queno.constants import DEFAULT_LOTTERY_ADDRESS, DEFAULT_TOKEN_ADDRESS


DEFAULT_RPC_URL = "http://127.0.0.1:8545/"

# Config file paths for Linux, macOS, and Windows
DEFAULT_CONF_PATHS = [
    # Linux
    os.path.expanduser("~/.queno/queno.conf"),
    # macOS
    os.path.expanduser("~/Library/Application Support/Queno/queno.conf"),
    # Windows (via APPDATA)
    os.path.join(os.environ.get("APPDATA", ""), "Queno", "queno.conf"),
]

ENV_PREFIX = "QUENO_"

CONF_KEYS = {
    "rpcurl": "RPC_URL",
    "rpcuser": "RPC_USER",
    "rpcpassword": "RPC_PASSWORD",
    "rpctimeout": "RPC_TIMEOUT",
    "lotteryaddress": "LOTTERY_ADDRESS",
    "tokenaddress": "TOKEN_ADDRESS",
    "lotteryabi": "LOTTERY_ABI",
    "tokenabi": "TOKEN_ABI",
    "pollinterval": "POLL_INTERVAL",
    "receipttimeout": "RECEIPT_TIMEOUT",
    "resulttimeout": "RESULT_TIMEOUT",
    "loglevel": "LOG_LEVEL",
}


@dataclass(frozen=True)
class Settings:
    rpc_url: str = DEFAULT_RPC_URL
    rpc_user: str = ""
    rpc_password: str = ""
    rpc_timeout: float = 60.0
    lottery_address: str = DEFAULT_LOTTERY_ADDRESS
    token_address: str = DEFAULT_TOKEN_ADDRESS
    lottery_abi: str = ""
    token_abi: str = ""
    poll_interval: float = 2.0
    receipt_timeout: float = 600.0
    # None waits for the outcome event indefinitely
    result_timeout: Optional[float] = None
    log_level: str = "INFO"
    conf_path: Optional[str] = None


def read_conf_file(path: str) -> Dict[str, str]:
    values: Dict[str, str] = {}
    with open(path, "r", encoding="utf-8") as f:
        for raw in f:
            line = raw.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            key = key.strip().lower()
            if key in CONF_KEYS:
                values[key] = value.strip()
    return values


def _parse_seconds(key: str, raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise RuntimeError(f"{key} must be a number of seconds, got {raw!r}")
    if value <= 0:
        raise RuntimeError(f"{key} must be positive, got {raw!r}")
    return value


def load_settings(paths: Optional[List[str]] = None,
                  environ: Optional[Dict[str, str]] = None) -> Settings:
    """Read the first usable conf file, then apply QUENO_* environment overrides."""
    environ = os.environ if environ is None else environ
    values: Dict[str, str] = {}
    conf_path = None

    for path in DEFAULT_CONF_PATHS if paths is None else paths:
        if not os.path.exists(path):
            continue
        try:
            values = read_conf_file(path)
        except OSError:
            continue
        conf_path = path
        break

    for key, env_name in CONF_KEYS.items():
        env_value = environ.get(ENV_PREFIX + env_name)
        if env_value:
            values[key] = env_value.strip()

    rpc_url = values.get("rpcurl") or DEFAULT_RPC_URL
    result_timeout = values.get("resulttimeout")

    return Settings(
        rpc_url=rpc_url,
        rpc_user=values.get("rpcuser", ""),
        rpc_password=values.get("rpcpassword", ""),
        rpc_timeout=_parse_seconds("rpctimeout", values["rpctimeout"]) if "rpctimeout" in values else 60.0,
        lottery_address=values.get("lotteryaddress") or DEFAULT_LOTTERY_ADDRESS,
        token_address=values.get("tokenaddress") or DEFAULT_TOKEN_ADDRESS,
        lottery_abi=values.get("lotteryabi", ""),
        token_abi=values.get("tokenabi", ""),
        poll_interval=_parse_seconds("pollinterval", values["pollinterval"]) if "pollinterval" in values else 2.0,
        receipt_timeout=(_parse_seconds("receipttimeout", values["receipttimeout"])
                         if "receipttimeout" in values else 600.0),
        result_timeout=_parse_seconds("resulttimeout", result_timeout) if result_timeout else None,
        log_level=(values.get("loglevel") or "INFO").upper(),
        conf_path=conf_path,
    )


def private_key_from_env(environ: Optional[Dict[str, str]] = None) -> str:
    environ = os.environ if environ is None else environ
    return environ.get(ENV_PREFIX + "PRIVATE_KEY", "").strip()
