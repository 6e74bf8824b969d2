import json
from typing import Any, Dict, List


LOTTERY_ABI: List[Dict[str, Any]] = [
    {
        "type": "function",
        "name": "generateLotteryNumbers",
        "stateMutability": "payable",
        "inputs": [
            {"name": "selectedNumbers", "type": "uint8[]"},
            {"name": "tokenAmount", "type": "uint256"},
            {"name": "currency", "type": "uint8"},
        ],
        "outputs": [],
    },
    {
        "type": "event",
        "name": "WinningNumbersGenerated",
        "anonymous": False,
        "inputs": [
            {"name": "owner", "type": "address", "indexed": True},
            {"name": "selectedNumbers", "type": "uint8[]", "indexed": False},
            {"name": "drawnNumbers", "type": "uint8[]", "indexed": False},
            {"name": "winningNumbers", "type": "uint8[]", "indexed": False},
            {"name": "reward", "type": "uint256", "indexed": False},
            {"name": "currency", "type": "uint8", "indexed": False},
        ],
    },
]

TOKEN_ABI: List[Dict[str, Any]] = [
    {
        "type": "function",
        "name": "balanceOf",
        "stateMutability": "view",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "approve",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "spender", "type": "address"},
            {"name": "value", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "type": "error",
        "name": "ERC20InsufficientAllowance",
        "inputs": [
            {"name": "spender", "type": "address"},
            {"name": "allowance", "type": "uint256"},
            {"name": "needed", "type": "uint256"},
        ],
    },
    {
        "type": "error",
        "name": "ERC20InsufficientBalance",
        "inputs": [
            {"name": "sender", "type": "address"},
            {"name": "balance", "type": "uint256"},
            {"name": "needed", "type": "uint256"},
        ],
    },
]


def load_abi(path: str) -> List[Dict[str, Any]]:
    """Read an ABI from a compiler artifact ({"abi": [...]}) or a bare ABI list."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("abi")
    if not isinstance(data, list):
        raise RuntimeError(f"No ABI found in {path}")
    return data


def event_input_names(abi: List[Dict[str, Any]], event_name: str) -> List[str]:
    for entry in abi:
        if entry.get("type") == "event" and entry.get("name") == event_name:
            return [inp["name"] for inp in entry.get("inputs", [])]
    raise RuntimeError(f"Event {event_name} not found in ABI")
