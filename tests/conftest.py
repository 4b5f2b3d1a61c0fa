"""Pytest configuration and fixtures."""

import copy

import pytest

from app import create_app
from config import TestConfig
from rest_client import BackendError, SelectResult


class FakeBackend:
    """
    In-memory stand-in for RestClient.

    Understands the subset of PostgREST parameters the app sends and returns
    the embedded make as a list, the way older backend drivers do.
    """

    def __init__(self, makes=None, models=None):
        self.tables = {
            "VehicleMake": [dict(r) for r in (makes or [])],
            "VehicleModel": [dict(r) for r in (models or [])],
        }
        self.calls = []
        self.fail = False

    def _next_id(self, table):
        return max((r["id"] for r in self.tables[table]), default=0) + 1

    def _check(self, method, table, *args):
        self.calls.append((method, table) + args)
        if self.fail:
            raise BackendError("backend down", status_code=503)

    def select(self, table, params, count=True):
        self._check("select", table, dict(params))
        rows = [copy.deepcopy(r) for r in self.tables[table]]

        for key, value in params.items():
            if key in ("select", "order", "limit", "offset"):
                continue
            op, _, operand = value.partition(".")
            if op == "eq":
                rows = [r for r in rows if str(r.get(key)) == operand]
            elif op == "ilike":
                needle = operand.strip("*").replace("\\_", "_").replace("\\%", "%").replace("\\\\", "\\").lower()
                rows = [r for r in rows if needle in str(r.get(key) or "").lower()]

        if "order" in params:
            field, _, direction = params["order"].partition(".")
            rows.sort(key=lambda r: (r.get(field) is None, r.get(field)), reverse=direction == "desc")

        total = len(rows)
        offset = int(params.get("offset", 0))
        if "limit" in params:
            rows = rows[offset:offset + int(params["limit"])]
        else:
            rows = rows[offset:]

        if "VehicleMake(name)" in params.get("select", ""):
            makes = {m["id"]: m for m in self.tables["VehicleMake"]}
            for r in rows:
                make = makes.get(r.get("make_id"))
                r["VehicleMake"] = [{"name": make["name"]}] if make else []
        return SelectResult(rows=rows, total_count=total)

    def insert(self, table, record):
        self._check("insert", table, dict(record))
        row = dict(record, id=self._next_id(table))
        self.tables[table].append(row)
        return dict(row)

    def update(self, table, record_id, record):
        self._check("update", table, record_id, dict(record))
        for row in self.tables[table]:
            if row["id"] == record_id:
                row.update(record)
                return dict(row)
        return None

    def delete(self, table, record_id):
        self._check("delete", table, record_id)
        self.tables[table] = [r for r in self.tables[table] if r["id"] != record_id]

    def writes(self):
        return [c for c in self.calls if c[0] != "select"]


MAKES = [
    {"id": 1, "name": "Toyota", "abrv": "TOY"},
    {"id": 2, "name": "BMW", "abrv": "BMW"},
    {"id": 3, "name": "Audi", "abrv": "AUD"},
    {"id": 4, "name": "Ford", "abrv": "FRD"},
    {"id": 5, "name": "Honda", "abrv": "HON"},
    {"id": 6, "name": "Kia", "abrv": "KIA"},
    {"id": 7, "name": "Mazda", "abrv": "MAZ"},
]

MODELS = [
    {"id": 1, "make_id": 1, "name": "Corolla", "abrv": "COR"},
    {"id": 2, "make_id": 1, "name": "Yaris", "abrv": "YAR"},
    {"id": 3, "make_id": 2, "name": "X5", "abrv": "X5"},
    {"id": 4, "make_id": 99, "name": "Orphan", "abrv": "ORP"},
]


@pytest.fixture
def fake_backend():
    return FakeBackend(makes=MAKES, models=MODELS)


@pytest.fixture
def app(fake_backend):
    app = create_app(TestConfig)
    app.extensions["rest_backend"] = fake_backend
    yield app


@pytest.fixture
def client(app):
    return app.test_client()
