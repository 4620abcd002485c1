from __future__ import annotations
import yaml
from pathlib import Path
from pydantic import BaseModel, ConfigDict
from typing import List, Literal, Optional

Role = Literal["ordinary","backspace","enter","space-primary","space-suggestion"]

class KeyDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)
    id: str
    label: str
    value: Optional[str] = None
    role: Role = "ordinary"
    special: bool = False
    wide: bool = False
    full_width: bool = False

    @property
    def is_special(self) -> bool:
        return self.special or self.role != "ordinary"

class Layout:
    """
    Ordered rows of keys. Row-major key order is the evaluation order used by the
    engine (argmax ties, simultaneous selections).
    """
    def __init__(self, rows: List[List[KeyDefinition]]):
        self.rows = [list(r) for r in rows]
        self.keys: List[KeyDefinition] = [k for r in self.rows for k in r]
        self._by_id = {k.id: k for k in self.keys}
        if len(self._by_id) != len(self.keys):
            raise ValueError("duplicate key ids in layout")
        if not self.keys:
            raise ValueError("layout has no keys")

    def __len__(self): return len(self.keys)
    def __iter__(self): return iter(self.keys)
    def __contains__(self, key_id): return key_id in self._by_id
    def __getitem__(self, key_id:str) -> KeyDefinition: return self._by_id[key_id]

    @property
    def ids(self) -> List[str]:
        return [k.id for k in self.keys]

    @classmethod
    def from_rows(cls, rows: List[List[dict]]) -> "Layout":
        return cls([[KeyDefinition(**k) for k in row] for row in rows])

def _chars(prefix:str, chars:str, values:bool=True) -> List[KeyDefinition]:
    return [KeyDefinition(id=f"{prefix}-{c.lower()}", label=c.upper(), value=c.lower() if values else None) for c in chars]

def default_layout() -> Layout:
    return Layout([
        _chars("r1", "1234567890"),
        _chars("r2", "qwertyuiop"),
        _chars("r3", "asdfghjkl") + [KeyDefinition(id="r3-back", label="⌫", role="backspace", special=True, wide=True)],
        _chars("r4", "zxcvbnm") + [KeyDefinition(id="r4-enter", label="⏎", value="\n", role="enter", special=True, wide=True)],
        [KeyDefinition(id="r5-space-left", label="Space", value=" ", role="space-primary", special=True, wide=True),
         KeyDefinition(id="r5-space-suggest", label="", role="space-suggestion", special=True, wide=True)],
    ])

def load_layout(path:str|Path) -> Layout:
    """Layout YAML: ``rows:`` list of lists of key mappings."""
    with open(path,"r") as f: cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"{path}: expected a mapping with a 'rows' key")
    rows = cfg.get("rows")
    if not isinstance(rows, list) or not all(isinstance(r, list) for r in rows):
        raise ValueError(f"{path}: expected 'rows' as a list of lists")
    if not all(isinstance(k, dict) for r in rows for k in r):
        raise ValueError(f"{path}: every key must be a mapping")
    return Layout.from_rows(rows)

def keys_for_text(layout: Layout, text: str) -> List[str]:
    """Key ids a typist would aim at to enter ``text`` (space and newline map to their role keys)."""
    by_value = {}
    for k in layout:
        if k.role == "space-primary": by_value.setdefault(" ", k.id)
        elif k.role == "enter": by_value.setdefault("\n", k.id)
        if k.value is not None: by_value.setdefault(k.value, k.id)
        by_value.setdefault(k.label.lower(), k.id)
    out = []
    for ch in text:
        kid = by_value.get(ch) or by_value.get(ch.lower())
        if kid is None:
            raise ValueError(f"no key for character {ch!r}")
        out.append(kid)
    return out
