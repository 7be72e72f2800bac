"""
tests/test_receipts.py - Receipt Foundation Tests
"""

import json

from receipts import append_ledger, dual_hash, emit_receipt, merkle


class TestDualHash:
    """Test dual_hash."""

    def test_format(self):
        """sha256:blake3, both 64 hex chars."""
        sha, b3 = dual_hash("hypergraph").split(":")
        assert len(sha) == 64 and len(b3) == 64
        assert sha != b3

    def test_str_and_bytes_agree(self):
        """Strings are hashed as their UTF-8 bytes."""
        assert dual_hash("abc") == dual_hash(b"abc")


class TestEmitReceipt:
    """Test emit_receipt."""

    def test_fields(self):
        """Receipt carries type, ts, tenant and payload hash."""
        receipt = emit_receipt("sim_run", {"tenant_id": "t", "steps": 3})
        assert receipt["receipt_type"] == "sim_run"
        assert receipt["tenant_id"] == "t"
        assert receipt["steps"] == 3
        assert receipt["payload_hash"] == dual_hash(json.dumps({"tenant_id": "t", "steps": 3}, sort_keys=True))
        assert "ts" in receipt


class TestMerkle:
    """Test merkle."""

    def test_deterministic(self):
        """Same edges, same root; different edges, different root."""
        edges = [[0], [0, 0, 1], [1, 0, 2]]
        assert merkle(edges) == merkle([list(e) for e in edges])
        assert merkle(edges) != merkle(edges[:2])

    def test_empty(self):
        """Empty lists have a fixed root."""
        assert merkle([]) == dual_hash(b"empty")


class TestLedger:
    """Test append_ledger."""

    def test_appends_lines(self, tmp_path):
        """Each receipt becomes one JSON line; repeated calls append."""
        path = tmp_path / "ledger" / "receipts.jsonl"
        assert append_ledger([{"a": 1}, {"b": 2}], path) == 2
        append_ledger([{"c": 3}], path)
        lines = path.read_text().splitlines()
        assert [json.loads(line) for line in lines] == [{"a": 1}, {"b": 2}, {"c": 3}]
