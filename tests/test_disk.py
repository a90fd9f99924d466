import pytest

from limatools.disk import (
    bytes_size,
    check_resize,
    disk_matches,
    force_delete_command,
    ram_in_bytes,
    validate_disk_format,
)


def test_ram_in_bytes_plain_number():
    assert ram_in_bytes("512") == 512


def test_ram_in_bytes_gib():
    assert ram_in_bytes("1GiB") == 1 << 30


@pytest.mark.parametrize("spelling", ["1g", "1G", "1GB", "1Gi", "1 GiB", "1gib"])
def test_ram_in_bytes_spellings_agree(spelling):
    assert ram_in_bytes(spelling) == ram_in_bytes("1GiB")


def test_ram_in_bytes_units_are_binary_steps():
    assert ram_in_bytes("1m") * 1024 == ram_in_bytes("1g")
    assert ram_in_bytes("1k") * 1024 == ram_in_bytes("1m")
    assert ram_in_bytes("1g") * 1024 == ram_in_bytes("1t")


def test_ram_in_bytes_fraction():
    assert ram_in_bytes("1.5g") * 2 == ram_in_bytes("3g")


@pytest.mark.parametrize("bad", ["", "abc", "10X", "-1g", "1.2.3g", "g"])
def test_ram_in_bytes_invalid(bad):
    with pytest.raises(ValueError):
        ram_in_bytes(bad)


@pytest.mark.parametrize("text", ["10GiB", "100GiB", "512MiB", "1.5GiB", "2TiB"])
def test_bytes_size_round_trip(text):
    assert bytes_size(ram_in_bytes(text)) == text


def test_bytes_size_small_values_stay_in_bytes():
    assert bytes_size(512) == "512B"


def test_validate_disk_format_accepts_supported():
    for fmt in ("qcow2", "raw"):
        validate_disk_format(fmt)
    with pytest.raises(ValueError, match="not supported"):
        validate_disk_format("vmdk")


def test_disk_matches():
    assert disk_matches("data", ["data", "other", "data"]) == ["data", "data"]
    assert disk_matches("missing", ["data", "other"]) == []


def test_force_delete_command():
    assert force_delete_command("mydisk") == "limactl disk delete --force mydisk"


def test_check_resize_allows_growth_and_equal():
    check_resize(ram_in_bytes("20g"), ram_in_bytes("10g"))
    check_resize(ram_in_bytes("10g"), ram_in_bytes("10g"))
    with pytest.raises(ValueError, match="Disk shrinking is currently unavailable"):
        check_resize(ram_in_bytes("5g"), ram_in_bytes("10g"))


def test_check_resize_message_names_sizes():
    with pytest.raises(ValueError) as info:
        check_resize(ram_in_bytes("5GiB"), ram_in_bytes("10GiB"))
    assert "5GiB" in str(info.value)
    assert "10GiB" in str(info.value)