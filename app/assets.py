import logging
from dataclasses import dataclass
from pathlib import Path

from app.config import BotConfig


IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg")


class AssetError(RuntimeError):
    pass


@dataclass(frozen=True)
class Asset:
    name: str
    content: bytes

    @property
    def extension(self) -> str:
        return Path(self.name).suffix.lower()


@dataclass(frozen=True)
class WarrantyAssets:
    logo: Asset | None = None
    signature: Asset | None = None
    stamp: Asset | None = None
    font: bytes | None = None


def candidate_paths(assets_dir: str | Path, base: str) -> list[Path]:
    return [Path(assets_dir) / f"{base}{ext}" for ext in IMAGE_EXTENSIONS]


def find_asset(assets_dir: str | Path, base: str) -> Asset | None:
    # Первый найденный вариант выигрывает: png, затем jpg, затем jpeg
    for path in candidate_paths(assets_dir, base):
        try:
            return Asset(name=path.name, content=path.read_bytes())
        except OSError:
            continue
    logging.warning(f"Image not found: {base} (png/jpg/jpeg) in {assets_dir}")
    return None


def load_font(assets_dir: str | Path, file_name: str) -> bytes | None:
    path = Path(assets_dir) / file_name
    try:
        return path.read_bytes()
    except OSError:
        logging.warning(f"Font not found: {path}")
        return None


def load_assets(config: BotConfig) -> WarrantyAssets:
    font = load_font(config.assets_dir, config.font_file)
    if font is None and config.require_font:
        raise AssetError(f"Font {config.font_file} is missing in {config.assets_dir}")
    return WarrantyAssets(
        logo=find_asset(config.assets_dir, "logo"),
        signature=find_asset(config.assets_dir, "signature"),
        stamp=find_asset(config.assets_dir, "stamp"),
        font=font,
    )
