import copy
import re

import pytest
from fastapi.testclient import TestClient

from fleetadmin.data.data_service import DataService, get_data_service
from fleetadmin.main import app
from fleetadmin.services.table_client import BackendError

PRIMARY_KEYS = {
    "truck_owners": "owner_id",
    "trucks": "truck_id",
    "drivers": "driver_id",
    "customers": "customer_id",
    "locations": "location_id",
    "deliveries": "delivery_id",
    "detail_deliveries": "id_detail_livraison",
}

# embedded relation -> (table, local column, remote column, one-to-many)
RELATIONS = {
    ("trucks", "truck_owners"): ("truck_owners", "owner_id", "owner_id", False),
    ("drivers", "trucks"): ("trucks", "truck_id", "truck_id", False),
    ("deliveries", "detail_deliveries"): ("detail_deliveries", "delivery_id", "delivery_id", True),
}


def _split_columns(columns):
    parts, depth, current = [], 0, ""
    for char in columns:
        if char == "," and depth == 0:
            parts.append(current.strip())
            current = ""
            continue
        depth += char == "("
        depth -= char == ")"
        current += char
    if current.strip():
        parts.append(current.strip())
    return parts


class FakeTableClient:
    """In-memory stand-in for the remote tables, with the few embeds the app uses."""

    def __init__(self, tables=None):
        self.tables = {name: [] for name in PRIMARY_KEYS}
        for name, rows in (tables or {}).items():
            self.tables[name] = copy.deepcopy(rows)
        self.failures = {}
        self.calls = []

    def fail(self, op, table, code="XX000", message="backend unavailable"):
        self.failures[(op, table)] = BackendError(message=message, code=code, status_code=400)

    def _check(self, op, table):
        self.calls.append((op, table))
        error = self.failures.get((op, table))
        if error:
            raise error

    def _project(self, table, row, columns):
        result = {}
        for part in _split_columns(columns):
            embed = re.match(r"^(\w+)\s*\((.*)\)$", part)
            if embed:
                name, inner = embed.group(1), embed.group(2)
                target, local, remote, many = RELATIONS[(table, name)]
                related = [
                    self._project(target, r, inner)
                    for r in self.tables[target]
                    if row.get(local) is not None and r.get(remote) == row.get(local)
                ]
                result[name] = related if many else (related[0] if related else None)
            elif part == "*":
                result.update(copy.deepcopy(row))
            else:
                result[part] = row.get(part)
        return result

    def _matching(self, table, filters):
        return [r for r in self.tables[table] if all(r.get(k) == v for k, v in (filters or {}).items())]

    def select(self, table, columns="*", filters=None, order=None, descending=False):
        self._check("select", table)
        rows = [self._project(table, r, columns) for r in self._matching(table, filters)]
        if order:
            rows.sort(key=lambda r: r.get(order), reverse=descending)
        return rows

    def maybe_single(self, table, columns="*", filters=None):
        rows = self.select(table, columns=columns, filters=filters)
        if len(rows) > 1:
            raise BackendError(message="multiple rows", code="PGRST116", status_code=406)
        return rows[0] if rows else None

    def insert(self, table, row):
        self._check("insert", table)
        key = PRIMARY_KEYS[table]
        stored = copy.deepcopy(row)
        stored[key] = max([r[key] for r in self.tables[table]] or [0]) + 1
        self.tables[table].append(stored)
        return copy.deepcopy(stored)

    def update(self, table, values, filters):
        self._check("update", table)
        rows = self._matching(table, filters)
        if len(rows) != 1:
            raise BackendError(message="JSON object requested, multiple (or no) rows returned",
                               code="PGRST116", status_code=406)
        rows[0].update(copy.deepcopy(values))
        return copy.deepcopy(rows[0])

    def delete(self, table, filters):
        self._check("delete", table)
        keep = [r for r in self.tables[table] if r not in self._matching(table, filters)]
        self.tables[table] = keep


SEED = {
    "truck_owners": [
        {"owner_id": 1, "owner_name": "Diallo Transport", "owner_type": "Entreprise", "phone_number": "77 000 00 01",
         "email": "contact@diallo.sn", "address": "Dakar", "tax_id": "SN-001"},
        {"owner_id": 2, "owner_name": "Moussa Ndiaye", "owner_type": "Individuel", "phone_number": None,
         "email": None, "address": "Thies", "tax_id": None},
    ],
    "trucks": [
        {"truck_id": 10, "owner_id": 1, "license_plate": "DK 1234 AB", "truck_model": "Actros", "truck_type": "Semi remorque",
         "capacity_kg": 20000, "status": "active", "manufacture_year": 2018},
        {"truck_id": 11, "owner_id": 1, "license_plate": "DK-5678-CD", "truck_model": "FH16", "truck_type": "12 roues",
         "capacity_kg": 15000, "status": "maintenance", "manufacture_year": 2015},
        {"truck_id": 12, "owner_id": 2, "license_plate": "TH9012EF", "truck_model": "Axor", "truck_type": "10 roues",
         "capacity_kg": 10000, "status": "en_transit", "manufacture_year": 2020},
    ],
    "drivers": [
        {"driver_id": 100, "first_name": "Amadou", "last_name": "Fall", "license_number": "P-100", "status": "active", "truck_id": 10},
        {"driver_id": 101, "first_name": "Ibrahima", "last_name": "Sow", "license_number": "P-101", "status": "on_leave", "truck_id": 12},
        {"driver_id": 102, "first_name": "Cheikh", "last_name": "Ba", "license_number": "P-102", "status": "active", "truck_id": None},
    ],
    "customers": [
        {"customer_id": 1000, "name": "Sococim", "email": "achat@sococim.sn", "phone": "33 000", "address": "Rufisque"},
        {"customer_id": 1001, "name": "Sonatel", "email": None, "phone": None, "address": "Dakar"},
    ],
    "locations": [
        {"location_id": 50, "name": "Thies Depot", "address": "Dakar Port", "location_type": "depot", "location_distance": 70},
        {"location_id": 51, "name": "Touba Marche", "address": "Dakar Port", "location_type": "client", "location_distance": 190},
    ],
    "deliveries": [
        {"delivery_id": 200, "truck_id": 10, "customer_name": "Sococim", "driver_name": "Amadou Fall",
         "driver_license": "P-100", "pickup_location": "Dakar Port", "delivery_location": "Thies Depot",
         "pickup_date": "2024-05-13T08:00:00", "expected_delivery_date": "2024-05-13T12:00:00",
         "cargo_weight_kg": 5000, "distance_km": 70, "delivery_status": "decharge", "notes": ""},
        {"delivery_id": 201, "truck_id": 12, "customer_name": "Sococim", "driver_name": "Ibrahima Sow",
         "driver_license": "P-101", "pickup_location": "Dakar Port", "delivery_location": "Touba Marche",
         "pickup_date": "2024-05-15T07:30:00+00:00", "expected_delivery_date": "2024-05-15T18:00:00",
         "cargo_weight_kg": 3000, "distance_km": 190, "delivery_status": "en_transit", "notes": ""},
        {"delivery_id": 202, "truck_id": 11, "customer_name": "Sococim", "driver_name": "",
         "driver_license": "", "pickup_location": "Rufisque", "delivery_location": "Mbour",
         "pickup_date": "2024-05-01T09:00:00", "expected_delivery_date": "2024-05-01T15:00:00",
         "cargo_weight_kg": None, "distance_km": None, "delivery_status": "Planifie", "notes": ""},
    ],
    "detail_deliveries": [
        {"id_detail_livraison": 300, "delivery_id": 200, "frais_de_route": 10000, "frais_gazoil": 75500,
         "frais_de_payage": 2000, "charge_journaliere": None, "frais_divers": 500, "notes": "RAS"},
    ],
}


@pytest.fixture
def fake_client():
    return FakeTableClient(SEED)


@pytest.fixture
def service(fake_client):
    return DataService(fake_client)


@pytest.fixture
def api(service):
    app.dependency_overrides[get_data_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
