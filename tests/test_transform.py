"""Tests for global to tile-local coordinate mapping."""

from snapshot_worker.transform import tile_bbox, tile_for_point, tile_origin, to_local
from snapshot_worker.types import TileAddress


class TestToLocal:
    """Tests for to_local."""

    def test_origin_tile_is_identity(self) -> None:
        address = TileAddress(tile_x=0, tile_y=0, tile_size=512)
        assert to_local((12.5, 40.0), address) == (12.5, 40.0)

    def test_offset_tile(self) -> None:
        address = TileAddress(tile_x=1, tile_y=0, tile_size=10)
        assert to_local((15, 5), address) == (5.0, 5.0)

    def test_negative_tile(self) -> None:
        address = TileAddress(tile_x=-1, tile_y=-2, tile_size=100)
        assert to_local((-50, -150), address) == (50.0, 50.0)

    def test_points_off_tile_are_not_clamped(self) -> None:
        address = TileAddress(tile_x=2, tile_y=2, tile_size=10)
        assert to_local((0, 35), address) == (-20.0, 15.0)


class TestTileAddressing:
    """Tests for tile origin, bbox and point-to-tile lookup."""

    def test_tile_origin(self) -> None:
        assert tile_origin(TileAddress(tile_x=3, tile_y=-2, tile_size=512)) == (1536.0, -1024.0)

    def test_tile_bbox(self) -> None:
        assert tile_bbox(TileAddress(tile_x=1, tile_y=1, tile_size=256)) == (256, 256, 512, 512)

    def test_tile_for_point(self) -> None:
        assert tile_for_point((600, 10), 512) == (1, 0)

    def test_tile_for_point_floors_negatives(self) -> None:
        assert tile_for_point((-1, -512), 512) == (-1, -1)

    def test_point_maps_into_its_own_tile(self) -> None:
        point = (1234.5, -77.0)
        tile_x, tile_y = tile_for_point(point, 256)
        local_x, local_y = to_local(point, TileAddress(tile_x=tile_x, tile_y=tile_y, tile_size=256))
        assert 0 <= local_x < 256
        assert 0 <= local_y < 256
