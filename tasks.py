# tasks.py
"""
Developer task runner using Invoke.
Run `inv --list` to see tasks.

Key tasks:
  inv scan --input <txt|image>
  inv samples
  inv test
  inv clean
"""

from invoke import task
from pathlib import Path
import shutil
import sys


REPO = Path(__file__).parent
SAMPLEDIR = REPO / "data" / "samples"
SCANDIR = REPO / "data" / "interim" / "scans"


def _python():
    """Return the python executable inside the current venv."""
    return sys.executable or "python"


@task(
    help={
        "input": "Path to a .txt (recognized text) or image file",
        "json": "Write JSON to data/interim/scans instead of printing text",
    }
)
def scan(c, input, json=False):
    """Parse one receipt."""
    if not json:
        c.run(f'"{_python()}" finsignal.py scan "{input}"', pty=False)
        return
    SCANDIR.mkdir(parents=True, exist_ok=True)
    out = SCANDIR / (Path(input).stem + ".json")
    c.run(f'"{_python()}" finsignal.py scan "{input}" --json > "{out}"', pty=False)
    print(f"[OK] scan -> {out}")


@task
def samples(c):
    """Write the canned fallback receipts to data/samples as .txt files."""
    from ocr.samples import FALLBACK_RECEIPTS

    SAMPLEDIR.mkdir(parents=True, exist_ok=True)
    for i, text in enumerate(FALLBACK_RECEIPTS, start=1):
        path = SAMPLEDIR / f"receipt_{i:02d}.txt"
        path.write_text(text + "\n", encoding="utf-8")
        print(f"Wrote {path}")


@task
def test(c):
    """Run unit tests with pytest."""
    c.run(f'"{_python()}" -m pytest -q', pty=False)


@task
def clean(c):
    """Delete interim outputs."""
    if SCANDIR.exists():
        shutil.rmtree(SCANDIR)
        print(f"Removed {SCANDIR}")
    SCANDIR.mkdir(parents=True, exist_ok=True)
