"""Verify that the libraries invoice generation needs are installed."""

from __future__ import annotations

import sys
from typing import List, Tuple

REQUIRED_MODULES = [
    ("pymupdf (fitz)", "fitz"),
    ("pdfplumber", "pdfplumber"),
    ("Pillow (PIL)", "PIL.ImageFont"),
    ("pydantic", "pydantic"),
    ("PyYAML", "yaml"),
    ("pandas", "pandas"),
    ("openpyxl", "openpyxl"),
]


def check_dependencies() -> List[Tuple[str, bool, str]]:
    """Check required dependencies. Returns list of (name, ok, message)."""
    import importlib

    results: List[Tuple[str, bool, str]] = []
    for name, module in REQUIRED_MODULES:
        try:
            importlib.import_module(module)
            results.append((name, True, "OK"))
        except ImportError as e:
            results.append((name, False, f"Missing: {e}"))

    # Pillow without FreeType cannot size the default font
    try:
        from PIL import features
        if features.check("freetype2"):
            results.append(("Pillow FreeType", True, "OK"))
        else:
            results.append(("Pillow FreeType", False, "Pillow built without FreeType"))
    except ImportError as e:
        results.append(("Pillow FreeType", False, f"Missing: {e}"))

    return results


def run_check(verbose: bool = True) -> bool:
    """Run dependency check, print report, return True if all OK."""
    results = check_dependencies()
    ok_count = sum(1 for _, ok, _ in results if ok)
    all_ok = ok_count == len(results)

    if verbose:
        print("Dependency check\n")
        for name, ok, msg in results:
            status = "OK" if ok else "MISSING"
            print(f"  {name}: {status}" + ("" if msg == "OK" else f"  {msg}"))
        print()
        if all_ok:
            print("All dependencies found.")
        else:
            print(f"{len(results) - ok_count} of {len(results)} missing. Install with: pip install -e .")

    return all_ok


if __name__ == "__main__":
    success = run_check(verbose=True)
    sys.exit(0 if success else 1)
