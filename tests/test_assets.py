from dataclasses import replace

import pytest

from app.assets import AssetError, find_asset, load_assets, load_font

from conftest import image_bytes


def test_prefers_png_over_jpg(assets_dir):
    assets_dir.mkdir()
    (assets_dir / "logo.jpg").write_bytes(image_bytes("JPEG"))
    (assets_dir / "logo.png").write_bytes(image_bytes("PNG"))

    asset = find_asset(assets_dir, "logo")
    assert asset.name == "logo.png"
    assert asset.extension == ".png"


def test_falls_back_to_jpeg(assets_dir):
    assets_dir.mkdir()
    (assets_dir / "stamp.jpeg").write_bytes(b"jpeg-bytes")

    asset = find_asset(assets_dir, "stamp")
    assert asset.name == "stamp.jpeg"
    assert asset.content == b"jpeg-bytes"


def test_missing_asset_is_absent(assets_dir):
    assert find_asset(assets_dir, "signature") is None
    assert load_font(assets_dir, "DejaVuSans.ttf") is None


def test_load_assets_tolerates_missing_images(config, assets_dir):
    assets_dir.mkdir()
    (assets_dir / "signature.png").write_bytes(image_bytes())

    assets = load_assets(config)
    assert assets.logo is None
    assert assets.stamp is None
    assert assets.signature.name == "signature.png"
    assert assets.font is None


def test_missing_font_is_fatal_when_required(config):
    required = replace(config, require_font=True)
    with pytest.raises(AssetError):
        load_assets(required)
