"""
Build a synthetic authroot.stl and authrootstl.cab for trying the CLI offline.

Infrastructure script — the trust list carries freshly generated CT log keys
(two EC P-256, one RSA 2048), so verbose output shows real key descriptions:

  ContentInfo (signedData)
  └── SignedData
      └── contentInfo (OID 1.3.6.1.4.1.311.10.1 = szOID_CTL)
          └── CTL { sequenceNumber, ctlThisUpdate, ..., [0] extensions }
              └── 1.3.6.1.4.1.311.10.3.52 { versions=[1], 3 SPKIs }

Usage:
  python scripts/build_sample_cab.py [OUTPUT_DIR]
  authroot-ctlogs --verbose --cab OUTPUT_DIR/authrootstl.cab
"""

from __future__ import annotations

import sys
from datetime import UTC, datetime
from pathlib import Path

from cabarchive import CabArchive, CabFile

from tests.der_builder import build_authroot_stl
from tests.keys import ec_spki, rsa_spki

DEFAULT_OUTPUT_DIR = Path(__file__).parent.parent / "samples"
STL_FILE = "authroot.stl"
CAB_FILE = "authrootstl.cab"


def build_sample(output_dir: Path, sequence_number: int = 1) -> tuple[Path, Path]:
    """Write authroot.stl and authrootstl.cab into output_dir; return both paths."""
    stl = build_authroot_stl(
        sequence_number=sequence_number,
        effective_date=datetime.now(UTC).replace(microsecond=0),
        versions=(1,),
        spkis=(ec_spki(), ec_spki(), rsa_spki()),
    )

    cabinet = CabArchive()
    cabinet[STL_FILE] = CabFile(stl)

    output_dir.mkdir(parents=True, exist_ok=True)
    stl_path = output_dir / STL_FILE
    cab_path = output_dir / CAB_FILE
    stl_path.write_bytes(stl)
    cab_path.write_bytes(cabinet.save(compress=True))
    return stl_path, cab_path


def main() -> None:
    output_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_OUTPUT_DIR
    for path in build_sample(output_dir):
        print(f"✓ {path} ({path.stat().st_size} bytes)")  # noqa: T201


if __name__ == "__main__":
    main()
