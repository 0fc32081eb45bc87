from __future__ import annotations
import json
from typing import Any, Dict


class ERC20Metadata:
    """
    ERC20 token metadata (name, symbol, decimals) as read from the
    token contract.
    """

    #: Token name
    name: str
    #: Token symbol
    symbol: str
    #: Token decimals
    decimals: int

    def __init__(self, name: str, symbol: str, decimals: int):
        self.name = name
        self.symbol = symbol
        self.decimals = decimals

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "symbol": self.symbol, "decimals": self.decimals}

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"ERC20Metadata({json.dumps(self.to_dict())})"
