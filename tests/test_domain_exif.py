import io

import pytest
from PIL import Image
from PIL.TiffImagePlugin import IFDRational

from geophoto.domain.exif import GPS_IFD, extract_gps


def _jpeg(gps_ifd=None) -> bytes:
    img = Image.new("RGB", (8, 8), color=(120, 160, 200))
    buf = io.BytesIO()
    if gps_ifd is None:
        img.save(buf, "JPEG")
    else:
        exif = Image.Exif()
        exif[GPS_IFD] = gps_ifd
        img.save(buf, "JPEG", exif=exif)
    return buf.getvalue()


def _dms(degrees, minutes, seconds_hundredths):
    return (IFDRational(degrees, 1), IFDRational(minutes, 1), IFDRational(seconds_hundredths, 100))


def test_extracts_northern_eastern_coordinates():
    payload = _jpeg({1: "N", 2: _dms(48, 51, 2376), 3: "E", 4: _dms(2, 21, 792)})

    coordinate = extract_gps(payload)

    assert coordinate is not None
    assert coordinate.latitude == pytest.approx(48.8566, abs=1e-6)
    assert coordinate.longitude == pytest.approx(2.3522, abs=1e-6)


def test_southern_and_western_refs_are_negative():
    payload = _jpeg({1: "S", 2: _dms(33, 52, 0), 3: "W", 4: _dms(70, 40, 0)})

    coordinate = extract_gps(payload)

    assert coordinate.latitude == pytest.approx(-33.866667, abs=1e-6)
    assert coordinate.longitude == pytest.approx(-70.666667, abs=1e-6)


def test_result_is_rounded_to_six_decimals():
    payload = _jpeg({1: "N", 2: _dms(10, 10, 1011), 3: "E", 4: _dms(20, 20, 2022)})

    coordinate = extract_gps(payload)

    assert coordinate.latitude == round(coordinate.latitude, 6)
    assert coordinate.longitude == round(coordinate.longitude, 6)


def test_image_without_gps_returns_none():
    assert extract_gps(_jpeg()) is None


def test_gps_ifd_without_longitude_returns_none():
    assert extract_gps(_jpeg({1: "N", 2: _dms(48, 51, 2376)})) is None


@pytest.mark.parametrize("payload", [b"", b"not an image at all", b"\xff\xd8\xff\xe1garbage"])
def test_unparseable_payload_returns_none(payload):
    assert extract_gps(payload) is None
