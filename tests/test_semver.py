import pytest

from onexutil.semver import (
    Version,
    VersionError,
    highest_supported_version,
    major_minor,
    parse_generic,
    parse_semantic,
)

# (version, unparsed, equals_prev)
SEMANTIC_ITEMS = [
    ("0.1.0", "", False),
    ("1.0.0-0.3.7", "", False),
    ("1.0.0-alpha", "", False),
    ("1.0.0-alpha+001", "", True),
    ("1.0.0-alpha.1", "", False),
    ("1.0.0-alpha.beta", "", False),
    ("1.0.0-beta", "", False),
    ("1.0.0-beta+exp.sha.5114f85", "", True),
    ("1.0.0-beta.2", "", False),
    ("1.0.0-beta.11", "", False),
    ("1.0.0-rc.1", "", False),
    ("1.0.0-x.7.z.92", "", False),
    ("1.0.0", "", False),
    ("1.0.0+20130313144700", "", True),
    ("1.8.0-alpha.3", "", False),
    ("1.8.0-alpha.3.673+73326ef01d2d7c", "", False),
    ("1.9.0", "", False),
    ("1.10.0", "", False),
    ("1.11.0", "", False),
    ("2.0.0", "", False),
    ("2.1.0", "", False),
    ("2.1.1", "", False),
    ("42.0.0", "", False),
    ("   42.0.0", "42.0.0", True),
    ("\t42.0.0  ", "42.0.0", True),
    ("43.0.0-1", "43.0.0-1", False),
    ("43.0.0-1  ", "43.0.0-1", True),
    ("v43.0.0-1", "43.0.0-1", True),
    ("  v43.0.0", "43.0.0", False),
    (" 43.0.0 ", "43.0.0", True),
]

GENERIC_ITEMS = [
    ("0.1.0", "0.1.0", False),
    ("1.0.0-0.3.7", "1.0.0", False),
    ("1.0.0-alpha", "1.0.0", True),
    ("1.0.0-alpha+001", "1.0.0", True),
    ("1.0.0-alpha.1", "1.0.0", True),
    ("1.0.0-alpha.beta", "1.0.0", True),
    ("1.0.0.beta", "1.0.0", True),
    ("1.0.0-beta+exp.sha.5114f85", "1.0.0", True),
    ("1.0.0.beta.2", "1.0.0", True),
    ("1.0.0.beta.11", "1.0.0", True),
    ("1.0.0.rc.1", "1.0.0", True),
    ("1.0.0-x.7.z.92", "1.0.0", True),
    ("1.0.0", "1.0.0", True),
    ("1.0.0+20130313144700", "1.0.0", True),
    ("1.2", "1.2", False),
    ("1.2a.3", "1.2", True),
    ("1.2.3", "1.2.3", False),
    ("1.2.3.0", "1.2.3.0", True),
    ("1.2.3a", "1.2.3", True),
    ("1.2.3-foo.", "1.2.3", True),
    ("1.2.3-.foo", "1.2.3", True),
    ("1.2.3-01", "1.2.3", True),
    ("1.2.3+", "1.2.3", True),
    ("1.2.3+foo.", "1.2.3", True),
    ("1.2.3+.foo", "1.2.3", True),
    ("1.02.3", "1.2.3", True),
    ("1.2.03", "1.2.3", True),
    ("1.2.003", "1.2.3", True),
    ("1.2.3.4", "1.2.3.4", False),
    ("1.2.3.4b3", "1.2.3.4", True),
    ("1.2.3.4.5", "1.2.3.4.5", False),
    ("1.9.0", "1.9.0", False),
    ("1.9.0.0.0.0.0.0", "1.9.0.0.0.0.0.0", True),
    ("1.10.0", "1.10.0", False),
    ("1.11.0", "1.11.0", False),
    ("1.11.0.0.5", "1.11.0.0.5", False),
    ("2.0.0", "2.0.0", False),
    ("2.1.0", "2.1.0", False),
    ("2.1.1", "2.1.1", False),
    ("42.0.0", "42.0.0", False),
    ("   42.0.0", "42.0.0", True),
    ("\t42.0.0  ", "42.0.0", True),
    ("42.0.0-1", "42.0.0", True),
    ("42.0.0-1  ", "42.0.0", True),
    ("v42.0.0-1", "42.0.0", True),
    ("  v43.0.0", "43.0.0", False),
    (" 43.0.0 ", "43.0.0", True),
]


def test_semantic_versions():
    prev = None
    for text, unparsed, equals_prev in SEMANTIC_ITEMS:
        version = parse_semantic(text)
        assert str(version) == (unparsed or text), text
        if prev is not None:
            cmp = version.compare(prev)
            reverse = parse_semantic(prev).compare(text)
            assert cmp != -1, f"unexpected ordering {text!r} < {prev!r}"
            if equals_prev:
                assert cmp == 0, f"expected {text!r} == {prev!r}"
            else:
                assert cmp == 1, f"expected {text!r} > {prev!r}"
            assert cmp == -reverse
        prev = text


def test_generic_versions():
    prev = None
    for text, unparsed, equals_prev in GENERIC_ITEMS:
        version = parse_generic(text)
        assert str(version) == (unparsed or text), text
        if prev is not None:
            cmp = version.compare(prev)
            reverse = parse_generic(prev).compare(text)
            assert cmp != -1, f"unexpected ordering {text!r} < {prev!r}"
            if equals_prev:
                assert cmp == 0, f"expected {text!r} == {prev!r}"
            else:
                assert cmp == 1, f"expected {text!r} > {prev!r}"
            assert cmp == -reverse
        prev = text


@pytest.mark.parametrize(
    "text",
    [
        "1", "1.2", "1.2.3.4", ".2.3", "1..3", "1.2.", "", "..",
        "-1.2.3", "1.-2.3", "1.2.-3", "1a.2.3", "1.2a.3", "1.2.3a",
        "a1.2.3", "a.b.c", "1 .2.3", "1. 2.3",
        "01.2.3", "1.02.3", "1.2.03",
        "1.2.3-/",
        "1.2.3-", "1.2.3-.", "1.2.3-foo.", "1.2.3-.foo",
        "1.2.3-01",
        "1.2.3+/",
        "1.2.3+", "1.2.3+.", "1.2.3+foo.", "1.2.3+.foo",
        "v 1.2.3", "vv1.2.3",
    ],
)
def test_bad_semantic_versions(text):
    with pytest.raises(VersionError):
        parse_semantic(text)


@pytest.mark.parametrize(
    "text",
    [
        "1", "01.2.3", "-1.2.3", "1.-2.3", ".2.3", "1..3", "1a.2.3",
        "a1.2.3", "1 .2.3", "1. 2.3", "1.bob", "bob", "v 1.2.3",
        "vv1.2.3", "", ".",
    ],
)
def test_bad_generic_versions(text):
    with pytest.raises(VersionError):
        parse_generic(text)


@pytest.mark.parametrize(
    "text,semver,components,major,minor,patch,pre_release,build_metadata",
    [
        ("1.0.2", True, (1, 0, 2), 1, 0, 2, "", ""),
        ("1.0.2-alpha+001", True, (1, 0, 2), 1, 0, 2, "alpha", "001"),
        ("1.2", False, (1, 2), 1, 2, 0, "", ""),
        (
            "1.0.2-beta+exp.sha.5114f85", True, (1, 0, 2), 1, 0, 2,
            "beta", "exp.sha.5114f85",
        ),
    ],
)
def test_components(
    text, semver, components, major, minor, patch, pre_release, build_metadata
):
    version = parse_semantic(text) if semver else parse_generic(text)
    assert version.components() == components
    assert version.major() == major
    assert version.minor() == minor
    assert version.patch() == patch
    assert version.pre_release() == pre_release
    assert version.build_metadata() == build_metadata


@pytest.mark.parametrize(
    "versions,expected",
    [
        (["v1.0.0"], "1.0.0"),
        (["0.3.0"], None),
        (["0.2.0"], None),
        (["1.0.0"], "1.0.0"),
        (["v0.3.0"], None),
        (["v0.2.0"], None),
        (["0.2.0", "v0.3.0"], None),
        (["0.2.0", "v1.0.0"], "1.0.0"),
        (["0.2.0", "v1.2.3"], "1.2.3"),
        (["v1.2.3", "v0.3.0"], "1.2.3"),
        (["v1.2.3", "v0.3.0", "2.0.1"], "1.2.3"),
        (["v1.2.3", "4.9.12", "v0.3.0", "2.0.1"], "1.2.3"),
        (["4.9.12", "2.0.1"], None),
        (["v1.2.3", "boo", "v0.3.0", "2.0.1"], "1.2.3"),
        ([], None),
        (["var", "boo", "foo"], None),
    ],
)
def test_highest_supported_version(versions, expected):
    if expected is None:
        with pytest.raises(VersionError):
            highest_supported_version(versions)
    else:
        assert highest_supported_version(versions).compare(expected) == 0


def test_with_methods_replace_parts():
    version = parse_semantic("1.2.3-alpha+build")
    assert str(version.with_major(4)) == "4.2.3-alpha+build"
    assert str(version.with_minor(7)) == "1.7.3-alpha+build"
    assert str(version.with_patch(9)) == "1.2.9-alpha+build"
    assert str(version.with_pre_release("rc.1")) == "1.2.3-rc.1+build"
    assert str(version.with_build_metadata("meta")) == "1.2.3-alpha+meta"
    assert str(version) == "1.2.3-alpha+build"


def test_with_major_truncates_generic_to_three_components():
    assert str(parse_generic("1.2.3.4").with_major(5)) == "5.2.3"


def test_major_minor():
    version = major_minor(1, 2)
    assert str(version) == "1.2"
    assert version.patch() == 0
    assert version.components() == (1, 2)


def test_at_least_and_less_than():
    low = parse_semantic("1.2.3")
    high = parse_semantic("1.3.0")
    assert high.at_least(low)
    assert not low.at_least(high)
    assert low.less_than(high)
    assert not high.less_than(low)
    assert low.at_least(parse_semantic("1.2.3+meta"))


def test_generic_missing_components_count_as_zero():
    assert parse_generic("1.4").compare("1.4.0") == 0
    assert parse_generic("1.4").compare("1.4.1") == -1


def test_ordering_operators():
    ordered = sorted(parse_semantic(t) for t in ["2.0.0", "1.0.0-rc.1", "1.0.0"])
    assert [str(v) for v in ordered] == ["1.0.0-rc.1", "1.0.0", "2.0.0"]


def test_compare_raises_on_bad_input():
    with pytest.raises(VersionError):
        parse_semantic("1.2.3").compare("1.2")


def test_overflowing_component_rejected():
    with pytest.raises(VersionError):
        parse_generic("1.18446744073709551616")


def test_repr_shows_version():
    assert repr(Version((1, 2, 3), semver=True, pre_release="a")) == "Version('1.2.3-a')"