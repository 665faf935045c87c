from collections.abc import Callable
from pathlib import Path

import pymupdf
import pytest

from customs_docs.documents.composer import PdfComposer
from customs_docs.documents.exceptions import CompositionError

PdfFactory = Callable[[str, list[str]], Path]


def _labels(path: Path) -> list[str]:
    with pymupdf.open(path) as doc:
        return [page.get_text().strip() for page in doc]


@pytest.fixture()
def base(pdf_factory: PdfFactory) -> Path:
    return pdf_factory("base.pdf", ["Base 1", "Base 2", "Base 3"])


@pytest.fixture()
def extra(pdf_factory: PdfFactory) -> Path:
    return pdf_factory("extra.pdf", ["Extra 1", "Extra 2"])


class TestInsertAfter:
    def test_after_first_page(self, base: Path, extra: Path, tmp_path: Path) -> None:
        out = PdfComposer().insert_after(base, extra, 0, tmp_path / "out.pdf")
        assert _labels(out) == ["Base 1", "Extra 1", "Extra 2", "Base 2", "Base 3"]

    @pytest.mark.parametrize("after", [2, 3, 50])
    def test_after_last_page_equals_append(
        self, base: Path, extra: Path, tmp_path: Path, after: int
    ) -> None:
        composer = PdfComposer()
        inserted = composer.insert_after(base, extra, after, tmp_path / "inserted.pdf")
        appended = composer.append(base, extra, tmp_path / "appended.pdf")
        assert _labels(inserted) == _labels(appended)

    def test_negative_index_prepends(self, base: Path, extra: Path, tmp_path: Path) -> None:
        out = PdfComposer().insert_after(base, extra, -5, tmp_path / "out.pdf")
        assert _labels(out) == ["Extra 1", "Extra 2", "Base 1", "Base 2", "Base 3"]

    @pytest.mark.parametrize("after", [0, 1, 2])
    def test_extract_splits_back_into_inputs(
        self, base: Path, extra: Path, tmp_path: Path, after: int
    ) -> None:
        composer = PdfComposer()
        merged = composer.insert_after(base, extra, after, tmp_path / "merged.pdf")
        recovered = composer.extract(merged, after + 1, after + 2, tmp_path / "recovered.pdf")
        assert _labels(recovered) == _labels(extra)
        assert composer.page_count(merged) == 5

        head = composer.extract(merged, 0, after, tmp_path / "head.pdf")
        rest = _labels(head)
        if after + 3 <= 4:
            rest += _labels(composer.extract(merged, after + 3, 4, tmp_path / "tail.pdf"))
        assert rest == _labels(base)

    def test_sources_are_untouched(self, base: Path, extra: Path, tmp_path: Path) -> None:
        base_bytes, extra_bytes = base.read_bytes(), extra.read_bytes()
        PdfComposer().insert_after(base, extra, 0, tmp_path / "out.pdf")
        assert base.read_bytes() == base_bytes
        assert extra.read_bytes() == extra_bytes


class TestAppend:
    def test_appends_all_pages(self, base: Path, extra: Path, tmp_path: Path) -> None:
        out = PdfComposer().append(base, extra, tmp_path / "out.pdf")
        assert _labels(out) == ["Base 1", "Base 2", "Base 3", "Extra 1", "Extra 2"]

    def test_output_may_overwrite_base(self, base: Path, extra: Path) -> None:
        PdfComposer().append(base, extra, base)
        assert _labels(base)[-1] == "Extra 2"

    def test_missing_input(self, base: Path, tmp_path: Path) -> None:
        with pytest.raises(CompositionError, match="Failed to read"):
            PdfComposer().append(base, tmp_path / "nope.pdf", tmp_path / "out.pdf")

    def test_corrupt_input(self, base: Path, tmp_path: Path) -> None:
        broken = tmp_path / "broken.pdf"
        broken.write_bytes(b"garbage")
        with pytest.raises(CompositionError, match="Failed to merge"):
            PdfComposer().append(base, broken, tmp_path / "out.pdf")


class TestCopyAndExtract:
    def test_copy_is_byte_identical(self, base: Path, tmp_path: Path) -> None:
        dest = PdfComposer().copy(base, tmp_path / "copies" / "copy.pdf")
        assert dest.read_bytes() == base.read_bytes()

    def test_copy_onto_itself_is_noop(self, base: Path) -> None:
        original = base.read_bytes()
        PdfComposer().copy(base, base)
        assert base.read_bytes() == original

    def test_copy_missing_source(self, tmp_path: Path) -> None:
        with pytest.raises(CompositionError, match="missing"):
            PdfComposer().copy(tmp_path / "nope.pdf", tmp_path / "out.pdf")

    def test_extract_rejects_bad_range(self, base: Path, tmp_path: Path) -> None:
        with pytest.raises(CompositionError, match="outside"):
            PdfComposer().extract(base, 2, 5, tmp_path / "out.pdf")
