import os
from pathlib import Path
from typing import Optional


# --- Helper: safe path normalize & reject traversal/abs paths ---
def _safe_normalize(p: str) -> Optional[str]:
    if not isinstance(p, str) or p.strip() == "":
        return None
    p = p.replace("\\", "/")
    # disallow absolute paths
    if os.path.isabs(p) or p.startswith("/"):
        return None
    clean = os.path.normpath(p).replace("\\", "/")
    if clean.startswith("..") or "/.." in clean or clean == "..":
        return None
    if clean.startswith("./"):
        clean = clean[2:]
    return clean


def write_text_file(base_dir: Path, rel_path: str, content: str) -> Path:
    """
    Write content under base_dir as UTF-8, byte for byte (no newline translation).
    Raises ValueError for paths escaping base_dir.
    """
    sp = _safe_normalize(rel_path)
    if sp is None:
        raise ValueError(f"unsafe file path: {rel_path!r}")
    target = Path(base_dir) / sp
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w", encoding="utf-8", newline="") as fh:
        fh.write(content)
    return target
