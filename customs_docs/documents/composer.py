import shutil
from pathlib import Path

import pymupdf

from customs_docs.documents.exceptions import CompositionError
from customs_docs.logging.logger import Log


class PdfComposer:
    """Merges, splits and copies PDF files without touching the sources.

    Every operation reads its inputs fully before writing, so an output path may
    name one of the inputs when the caller explicitly wants to overwrite it.
    """

    def append(self, base_path: Path, extra_path: Path, output_path: Path) -> Path:
        """Write base pages followed by every page of extra_path."""
        return self._merge(base_path, extra_path, None, output_path)

    def insert_after(
        self,
        base_path: Path,
        extra_path: Path,
        after_page_index: int,
        output_path: Path,
    ) -> Path:
        """Insert all pages of extra_path as one block after after_page_index.

        The insertion point is clamped into [0, base page count], so inserting
        after the last page (or beyond) is the same as appending.
        """
        return self._merge(base_path, extra_path, after_page_index + 1, output_path)

    def copy(self, source_path: Path, dest_path: Path) -> Path:
        """Duplicate source_path byte for byte."""
        if not source_path.exists():
            raise CompositionError(f"Cannot copy missing file: {source_path}")
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        if source_path.resolve() != dest_path.resolve():
            shutil.copyfile(source_path, dest_path)
        return dest_path

    def extract(self, source_path: Path, first_page: int, last_page: int, output_path: Path) -> Path:
        """Write pages first_page..last_page (inclusive, 0-based) to a new file."""
        source = self._read(source_path)
        try:
            with pymupdf.open(stream=source, filetype="pdf") as src:  # type: ignore[no-untyped-call]
                if not 0 <= first_page <= last_page < src.page_count:
                    raise CompositionError(
                        f"Page range {first_page}..{last_page} is outside "
                        f"{source_path} ({src.page_count} pages)"
                    )
                with pymupdf.open() as out:  # type: ignore[no-untyped-call]
                    out.insert_pdf(src, from_page=first_page, to_page=last_page)
                    self._save(out, output_path)
        except CompositionError:
            raise
        except Exception as exc:
            raise CompositionError(f"Failed to extract pages from {source_path}: {exc}") from exc
        return output_path

    def page_count(self, path: Path) -> int:
        source = self._read(path)
        try:
            with pymupdf.open(stream=source, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                return int(doc.page_count)
        except Exception as exc:
            raise CompositionError(f"Failed to open {path}: {exc}") from exc

    def _merge(
        self,
        base_path: Path,
        extra_path: Path,
        start_index: int | None,
        output_path: Path,
    ) -> Path:
        base_bytes = self._read(base_path)
        extra_bytes = self._read(extra_path)
        try:
            with (
                pymupdf.open(stream=base_bytes, filetype="pdf") as base,  # type: ignore[no-untyped-call]
                pymupdf.open(stream=extra_bytes, filetype="pdf") as extra,  # type: ignore[no-untyped-call]
            ):
                base_count = base.page_count
                start = base_count if start_index is None else min(max(start_index, 0), base_count)
                if extra.page_count:
                    base.insert_pdf(extra, start_at=start)
                self._save(base, output_path)
                Log.debug(
                    f"Merged {extra.page_count} page(s) of {extra_path.name} into "
                    f"{base_path.name} at index {start}"
                )
        except Exception as exc:
            raise CompositionError(
                f"Failed to merge {extra_path} into {base_path}: {exc}"
            ) from exc
        return output_path

    @staticmethod
    def _read(path: Path) -> bytes:
        try:
            return path.read_bytes()
        except OSError as exc:
            raise CompositionError(f"Failed to read {path}: {exc}") from exc

    @staticmethod
    def _save(doc: pymupdf.Document, output_path: Path) -> None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        doc.save(str(output_path), garbage=3, deflate=True)
