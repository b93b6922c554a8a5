import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from synctex_samples import make_synctex  # noqa: E402


@pytest.fixture
def tex_project(tmp_path):
    """A PDF with its .synctex file and the two source files it records."""
    main_tex = tmp_path / "main.tex"
    chapter_tex = tmp_path / "chapter.tex"
    main_tex.write_text("\\documentclass{article}\n")
    chapter_tex.write_text("\\section{Chapter}\n")

    pdf_path = tmp_path / "main.pdf"
    pdf_path.write_bytes(b"%PDF-1.5\n")
    (tmp_path / "main.synctex").write_text(make_synctex(str(main_tex), str(chapter_tex)))

    return {"pdf": pdf_path, "main": main_tex, "chapter": chapter_tex, "dir": tmp_path}
