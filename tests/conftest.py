"""Shared fixtures; Qt runs on the offscreen platform so no display is needed."""

import json
import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtCore import QSettings
from PyQt6.QtWidgets import QApplication

from fogmap.storage import MemoryStorage
from fogmap.strokes import FogStroke


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance()
    if app is None:
        app = QApplication(["fogmap-tests"])
    return app


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def strokes():
    return [
        FogStroke(10.0, 20.0, 40.0, False),
        FogStroke(15.5, 22.25, 40.0, False),
        FogStroke(12.0, 21.0, 25.0, True),
    ]


@pytest.fixture
def ini_settings(tmp_path):
    return QSettings(str(tmp_path / "fogmap.ini"), QSettings.Format.IniFormat)


@pytest.fixture
def catalog_file(tmp_path):
    data = {
        "meta": {"map": {"width": 2000, "height": 1000, "image": "/data/map.png"}},
        "pois": [
            {"id": "oakhaven", "name": "Oakhaven", "type": "city", "coord": [400, 300],
             "level": "1-3", "summary": "Market town on the river.", "tags": ["trade", "river"]},
            {"id": "prancing", "name": "The Prancing Goat", "type": "tavern", "coord": [420, 310],
             "summary": "Cheap ale, <loud> bards.", "tags": ["rumors"], "image": "img/goat.png"},
            {"id": "barrow", "name": "Old Barrow", "type": "crypt", "coord": [1500, 800]},
        ],
    }
    path = tmp_path / "pois.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path
