import pytest

from service.interior import InteriorAnalyzer
from service.vision import GeminiVisionClient, VisionError
from valuation.errors import InputError, InputErrorKind


class FakeVision(GeminiVisionClient):
    def __init__(self, reply=None, error=None):
        super().__init__(api_key="k", model="m")
        self.reply = reply
        self.error = error
        self.calls = []

    async def classify_interior(self, image_path):
        self.calls.append(image_path.name)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def upload_dir(tmp_path):
    (tmp_path / "seat.jpg").write_bytes(b"jpeg")
    return tmp_path


def test_missing_filename(upload_dir):
    analyzer = InteriorAnalyzer(upload_dir, FakeVision())
    with pytest.raises(InputError) as exc_info:
        analyzer.resolve_upload(None)
    assert exc_info.value.kind is InputErrorKind.MISSING_REQUIRED_FIELD
    assert exc_info.value.field == "filename"


@pytest.mark.parametrize("name", ["nope.jpg", "../seat.jpg", ".", "a" * 300, "a\x00b.jpg"])
def test_unknown_or_escaping_file(upload_dir, name):
    analyzer = InteriorAnalyzer(upload_dir, FakeVision())
    with pytest.raises(InputError) as exc_info:
        analyzer.resolve_upload(name)
    assert exc_info.value.kind is InputErrorKind.RESOURCE_NOT_FOUND


@pytest.mark.asyncio
async def test_analyze_maps_condition(upload_dir):
    vision = FakeVision(reply='Here you go: {"condition":"poor","reasons":["rip","stain"]}')
    result = await InteriorAnalyzer(upload_dir, vision).analyze("seat.jpg", 500000)
    assert vision.calls == ["seat.jpg"]
    assert result.condition == "poor"
    assert result.value_delta == -35000
    assert result.reasons == ("rip", "stain")
    assert not result.degraded


@pytest.mark.asyncio
async def test_analyze_vision_failure_degrades(upload_dir):
    vision = FakeVision(error=VisionError("timeout"))
    result = await InteriorAnalyzer(upload_dir, vision).analyze("seat.jpg", 500000)
    assert result.degraded
    assert result.condition == "moderate"
    assert result.value_delta == -15000


@pytest.mark.asyncio
async def test_analyze_missing_file_is_not_degraded(upload_dir):
    with pytest.raises(InputError):
        await InteriorAnalyzer(upload_dir, FakeVision(reply="{}")).analyze("missing.jpg", 500000)
