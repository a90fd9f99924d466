import pytest

from limatools.editflags import complete_cpus, complete_memory_gib, yq_expressions


def test_complete_cpus():
    assert complete_cpus(1) == [1]
    assert complete_cpus(2) == [1, 2]
    assert complete_cpus(8) == [1, 2, 4, 8]
    assert complete_cpus(20) == [1, 2, 4, 8, 16, 20]


def test_complete_memory_gib():
    assert complete_memory_gib(1 << 30) == [0.5]
    assert complete_memory_gib(2 << 30) == [1]
    assert complete_memory_gib(4 << 30) == [1, 2]
    assert complete_memory_gib(8 << 30) == [1, 2, 4]
    assert complete_memory_gib(20 << 30) == [1, 2, 4, 8, 10]


def test_no_flags():
    assert yq_expressions({}, True) == []


def test_cpus_and_memory():
    assert yq_expressions({"cpus": 4, "memory": 2.0}, False) == [
        ".cpus = 4",
        '.memory = "2GiB"',
    ]


def test_memory_fraction():
    assert yq_expressions({"memory": 1.5}, False) == ['.memory = "1.5GiB"']


def test_dns():
    assert yq_expressions({"dns": ["1.1.1.1", "8.8.8.8"]}, False) == [
        '.dns += ["1.1.1.1","8.8.8.8"] | .dns |= unique | .hostResolver.enabled=false'
    ]


def test_dns_invalid():
    with pytest.raises(ValueError, match="dns"):
        yq_expressions({"dns": ["not-an-ip"]}, False)


def test_mount():
    assert yq_expressions({"mount": ["/tmp/a:w", "/tmp/b"]}, False) == [
        '.mounts += [{"location": "/tmp/a", "writable": true},'
        '{"location": "/tmp/b", "writable": false}] | .mounts |= unique_by(.location)'
    ]


def test_mount_type_and_writable():
    assert yq_expressions({"mount-type": "9p", "mount-writable": True}, False) == [
        '.mountType = "9p"',
        ".mounts[].writable = true",
    ]


def test_network():
    assert yq_expressions({"network": ["vzNAT", "lima:shared"]}, False) == [
        '.networks += [{"vzNAT": true},{"lima": "shared"}] | .networks |= unique_by(.lima)'
    ]


def test_network_invalid():
    with pytest.raises(ValueError, match="network name must be"):
        yq_expressions({"network": ["bogus"]}, False)


def test_rosetta():
    assert yq_expressions({"rosetta": True}, False) == [
        ".rosetta.enabled = true | .rosetta.binfmt = true"
    ]


def test_set_passthrough():
    expr = '.cpus = 2 | .memory = "2GiB"'
    assert yq_expressions({"set": expr}, False) == [expr]


@pytest.mark.parametrize(
    "value, expected",
    [(True, '.video.display = "default"'), (False, '.video.display = "none"')],
)
def test_video(value, expected):
    assert yq_expressions({"video": value}, False) == [expected]


def test_new_instance_only_flags_skipped_for_existing():
    flags = {"arch": "x86_64", "disk": 100, "vm-type": "vz", "plain": True}
    assert yq_expressions(flags, False) == []


def test_new_instance_only_flags():
    flags = {"plain": True, "vm-type": "vz", "disk": 100, "arch": "x86_64"}
    assert yq_expressions(flags, True) == [
        '.arch = "x86_64"',
        '.disk= "100GiB"',
        '.vmType = "vz"',
        ".plain = true",
    ]


@pytest.mark.parametrize(
    "mode, expected",
    [
        ("user", ".containerd.user = true | .containerd.system = false"),
        ("system", ".containerd.user = false | .containerd.system = true"),
        ("user+system", ".containerd.user = true | .containerd.system = true"),
        ("system+user", ".containerd.user = true | .containerd.system = true"),
        ("none", ".containerd.user = false | .containerd.system = false"),
    ],
)
def test_containerd(mode, expected):
    assert yq_expressions({"containerd": mode}, True) == [expected]


def test_containerd_invalid():
    with pytest.raises(ValueError, match="expected one of"):
        yq_expressions({"containerd": "both"}, True)


def test_order_follows_definitions():
    assert yq_expressions({"vm-type": "qemu", "cpus": 2}, True) == [
        ".cpus = 2",
        '.vmType = "qemu"',
    ]