from __future__ import annotations

import argparse
import os
import shutil
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pman.archive import Archive, decode_with_entries, load, save
from pman.constants import EXT_DATA, EXT_INFLATED, EXT_ZLIB
from pman.errors import FormatError, PmanError
from pman import zlibmember


def _read_archive(path: str):
    with open(path, "rb") as f:
        data = f.read()
    archive, entries = decode_with_entries(data)
    return archive, entries, len(data)


def _record_filename(offset: int, ext: str, dup: int = 0) -> str:
    # Zero-size entries can share an offset with the entry after them
    if dup:
        return f"{offset:08X}_{dup}{ext}"
    return f"{offset:08X}{ext}"


def _parse_record_stem(stem: str) -> Tuple[int, int]:
    offset, _, dup = stem.partition("_")
    return int(offset, 16), int(dup or "0")


def cmd_info(archive: str) -> bool:
    """Print header details and a summary of the payloads."""
    arc, entries, total = _read_archive(archive)
    members = sum(1 for r in arc if r.is_zlib_member())
    print(f"Archive: {archive}")
    print(f"  Size: {total} bytes")
    print(f"  Copyright: {arc.copyright}")
    print(f"  Entries: {len(arc)}")
    print(f"    Zlib members: {members}")
    print(f"    Raw: {len(arc) - members}")
    if entries:
        print(f"  Payloads: {entries[0].offset:#x}..{entries[-1].end:#x}")
    print(f"  Padding dropped on decode: {arc.dropped_padding} bytes")
    return True


def cmd_list(archive: str) -> bool:
    """List archive entries.

    Args:
        archive: Path to a PMAN file.
    """
    arc, entries, _ = _read_archive(archive)
    for i, (e, rec) in enumerate(zip(entries, arc)):
        if rec.is_zlib_member():
            print(f"{i}\t{e.offset:08X}\t{e.size}\tzlib({rec.declared_size()})")
        else:
            print(f"{i}\t{e.offset:08X}\t{e.size}\traw")
    return True


def cmd_unpack(archive: str, *, outdir: str = "output", inflate: bool = False, clean: bool = False, quiet: bool = False) -> bool:
    """Write every record to ``outdir`` named after its on-disk offset.

    Zlib members are written raw as ``.zlib`` unless ``inflate`` is set, in
    which case the inflated bytes go to ``.bin``. A member that fails to
    inflate is reported and written raw; the other records are unaffected.
    """
    arc, entries, _ = _read_archive(archive)
    if clean and os.path.isdir(outdir):
        shutil.rmtree(outdir)
    os.makedirs(outdir, exist_ok=True)
    failed = 0
    seen: Dict[int, int] = {}
    for i, (e, rec) in enumerate(zip(entries, arc)):
        dup = seen.get(e.offset, 0)
        seen[e.offset] = dup + 1
        if not rec.is_zlib_member():
            name, payload = _record_filename(e.offset, EXT_DATA, dup), rec.bytes()
        elif inflate:
            try:
                name, payload = _record_filename(e.offset, EXT_INFLATED, dup), rec.decompressed()
            except FormatError as exc:
                print(f"Warning: record {i} at {e.offset:08X}: {exc}; writing it compressed", file=sys.stderr)
                failed += 1
                name, payload = _record_filename(e.offset, EXT_ZLIB, dup), rec.bytes()
        else:
            name, payload = _record_filename(e.offset, EXT_ZLIB, dup), rec.bytes()
        with open(os.path.join(outdir, name), "wb") as wf:
            wf.write(payload)
        if not quiet:
            print(f"  {name}\t{len(payload)}")
    print(f"Done: {len(arc)} records to {outdir}" + (f" ({failed} failed to inflate)" if failed else ""))
    return failed == 0


def _collect_inputs(indir: str) -> List[Tuple[Tuple[int, int], Path]]:
    found: List[Tuple[Tuple[int, int], Path]] = []
    for p in Path(indir).iterdir():
        if not p.is_file() or p.suffix.lower() not in (EXT_DATA, EXT_ZLIB, EXT_INFLATED):
            continue
        try:
            key = _parse_record_stem(p.stem)
        except ValueError:
            print(f"Warning: skipping {p.name}: name is not a hex offset", file=sys.stderr)
            continue
        found.append((key, p))
    found.sort(key=lambda kp: (kp[0], kp[1].name))
    return found


def cmd_pack(indir: str, output: str, *, copyright: str, level: Optional[int] = None, source: Optional[str] = None) -> bool:
    """Build an archive from a directory written by ``unpack``.

    Files are ordered by their hex offset name. ``.bin`` files are wrapped as
    new zlib members; ``.dat`` and ``.zlib`` files are stored as they are.
    """
    orig = load(source) if source is not None else None
    arc = Archive(copyright)
    for _, p in _collect_inputs(indir):
        data = p.read_bytes()
        if p.suffix.lower() == EXT_INFLATED:
            data = zlibmember.compress(data, level)
        arc.append(data)
    written = save(arc, output)
    print(f"Packed {len(arc)} records into {output} ({written} bytes)")
    if orig is not None and orig.dropped_padding:
        print(
            f"Warning: {source} carried {orig.dropped_padding} byte(s) of padding between payloads; "
            "the packed archive does not reproduce it.",
            file=sys.stderr,
        )
    return True


def main(argv: List[str] | None = None):
    ap = argparse.ArgumentParser(
        prog="pman",
        description="PMAN game archive tool",
        epilog="Repacking packs payloads tightly; padding between payloads in the source is not kept.",
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_info = sub.add_parser("info", help="Show archive information")
    ap_info.add_argument("archive", help="Archive path")

    ap_list = sub.add_parser("list", help="List archive entries")
    ap_list.add_argument("archive", help="Archive path")

    ap_unpack = sub.add_parser("unpack", help="Write every record to a directory")
    ap_unpack.add_argument("archive", help="Archive path")
    ap_unpack.add_argument("--outdir", default="output", help="Output directory (default: output)")
    ap_unpack.add_argument("--inflate", action="store_true", help="Decompress zlib members and write them as .bin")
    ap_unpack.add_argument("--clean", action="store_true", help="Remove the output directory first")
    ap_unpack.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    ap_pack = sub.add_parser("pack", help="Build an archive from an unpacked directory")
    ap_pack.add_argument("indir", help="Directory of .dat/.zlib/.bin files named by hex offset")
    ap_pack.add_argument("output", help="Output archive path")
    ap_pack.add_argument("--copyright", default="", help="Copyright string (at most 55 bytes)")
    ap_pack.add_argument("--level", type=int, help="zlib level for .bin files (default 6)")
    ap_pack.add_argument("--source", help="Original archive; warns if its padding is lost")

    args = ap.parse_args(argv)
    try:
        if args.cmd == "info":
            cmd_info(args.archive)
        elif args.cmd == "list":
            cmd_list(args.archive)
        elif args.cmd == "unpack":
            ok = cmd_unpack(args.archive, outdir=args.outdir, inflate=args.inflate, clean=args.clean, quiet=args.quiet)
            sys.exit(0 if ok else 1)
        elif args.cmd == "pack":
            cmd_pack(args.indir, args.output, copyright=args.copyright, level=args.level, source=args.source)
        else:
            raise RuntimeError("Unknown command")
    except (PmanError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
