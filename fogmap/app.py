"""Launcher: ``fogmap CATALOG [--poi ID]``."""

import sys
from pathlib import Path
from typing import Annotated, Optional

import structlog
import typer
from PyQt6.QtGui import QIcon
from PyQt6.QtWidgets import QApplication

from . import __version__
from .catalog import load_catalog
from .exceptions import CatalogError, MapLoadError
from .log import configure_logging
from .map_loader import LoadedMap, load_map
from .settings import FogSettings, app_settings
from .sheet import parse_poi_link
from .storage import DirectoryStorage, KeyValueStorage, SettingsStorage

cli = typer.Typer(
    name="fogmap",
    help="Campaign map with a GM-controlled fog of war.",
    add_completion=False,
    no_args_is_help=True,
)


def app_dir() -> Path:
    """Folder holding the bundled ``assets/`` (package dir, or the frozen bundle)."""
    if getattr(sys, "frozen", False):
        meipass = getattr(sys, "_MEIPASS", None)
        if meipass:
            return Path(meipass)
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parent


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"fogmap {__version__}")
        raise typer.Exit()


def make_storage(storage_dir: str) -> KeyValueStorage:
    if storage_dir:
        return DirectoryStorage(storage_dir)
    return SettingsStorage(app_settings())


@cli.command()
def run(
    catalog: Annotated[Path, typer.Argument(help="Path to pois.json", show_default=False)],
    poi: Annotated[Optional[str], typer.Option("--poi", help="Open a place by id or fogmap://poi/<id> link")] = None,
    storage_dir: Annotated[Optional[Path], typer.Option("--storage-dir", help="Keep fog in this folder instead of app settings")] = None,
    log_level: Annotated[str, typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR")] = "INFO",
    version: Annotated[bool, typer.Option("--version", callback=version_callback, is_eager=True, help="Show version")] = False,
) -> None:
    """Open the campaign map described by CATALOG."""
    log = configure_logging(log_level)

    try:
        cat = load_catalog(catalog)
    except CatalogError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1) from e

    qapp = QApplication(sys.argv[:1])
    for cand in (app_dir() / "assets" / "fogmap.png", app_dir() / "assets" / "fogmap.ico"):
        if cand.exists():
            qapp.setWindowIcon(QIcon(str(cand)))
            break

    loaded: LoadedMap | None = None
    try:
        loaded = load_map(cat.map_image)
    except MapLoadError as e:
        log.error("Map unavailable, showing markers only", error=str(e))

    settings = app_settings()
    fog_settings = FogSettings.load(settings)
    if storage_dir is not None:
        fog_settings.storage_dir = str(storage_dir)

    # imported late: widgets need the QApplication above
    from .main_window import MainWindow

    w = MainWindow(cat, loaded, make_storage(fog_settings.storage_dir), settings, fog_settings)
    if poi:
        pid = parse_poi_link(poi) or poi
        w.open_poi(pid, center=True)
    w.show()
    code = qapp.exec()
    structlog.get_logger(__name__).debug("Exit", code=code)
    raise typer.Exit(code=code)


def main() -> None:
    cli()
