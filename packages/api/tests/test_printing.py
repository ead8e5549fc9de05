# This project was developed with assistance from AI tools.
"""Tests for the printable PDF rendering."""

from decimal import Decimal

import fitz
import pytest

from src.core.billing import print_record
from src.services.printing import render_record_pdf

from .conftest import actor_for


@pytest.mark.asyncio
async def test_rendered_pdf_carries_record_and_footer(world, store):
    world.db.add_lock(world.juan.id, world.maria.id)
    outcome = await print_record(store, actor_for(world.maria), world.juan.id, fee=Decimal("1.00"))

    pdf_bytes = render_record_pdf(outcome.value)

    assert pdf_bytes.startswith(b"%PDF")
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        assert doc.page_count == 1
        text = doc[0].get_text()
    assert f"Negative Record #{world.juan.id}" in text
    assert "Case no.: CV-2023-0142" in text
    assert "Type: Individual" in text
    assert f"Printed by user {world.maria.id}" in text
    # Empty fields are left out.
    assert "Company:" not in text
