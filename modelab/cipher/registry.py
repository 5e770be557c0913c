from __future__ import annotations

from typing import Dict, List, Type

from .primitive import AESPrimitive, BlockCipherPrimitive, SM4Primitive


def builtins() -> Dict[str, Type[BlockCipherPrimitive]]:
    return {cls.name: cls for cls in (SM4Primitive, AESPrimitive)}


class PrimitiveRegistry:
    def __init__(self):
        self._primitives: Dict[str, Type[BlockCipherPrimitive]] = builtins()

    def get(self, name: str) -> Type[BlockCipherPrimitive]:
        key = name.strip().lower()
        if key not in self._primitives:
            raise KeyError(f"Unknown block cipher: {name}")
        return self._primitives[key]

    def create(self, name: str, key: bytes) -> BlockCipherPrimitive:
        return self.get(name)(key)

    def register(self, cls: Type[BlockCipherPrimitive]) -> None:
        self._primitives[cls.name.lower()] = cls

    def list(self) -> List[str]:
        return sorted(self._primitives)

    def exists(self, name: str) -> bool:
        return name.strip().lower() in self._primitives
