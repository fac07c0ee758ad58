"""Unit tests for the block serializer."""

from textwrap import dedent

import pytest

from terraconf.exceptions import FormatError
from terraconf.models.overlay import AttributeOverlay
from terraconf.models.state import InstanceState, ResourceState
from terraconf.models.values import ListValue, MapValue, Primitive
from terraconf.render.serializer import (
    quote_string,
    render_dependencies,
    render_key,
    render_map,
    render_primitive_attribute,
    render_primitive_list,
    render_primitive_value,
    render_resource_block,
    render_resource_text,
    render_value,
    sanitize_resource_id,
)


def make_resource(attributes, resource_id="r-1", dependencies=None, resource_type="widget"):
    return ResourceState(
        type=resource_type,
        primary=InstanceState(id=resource_id, attributes=attributes),
        dependencies=dependencies or [],
    )


class TestSanitizeResourceID:
    """Test block label sanitization."""

    def test_with_periods(self):
        assert sanitize_resource_id("my.test.resource.name") == "my_test_resource_name"

    def test_without_periods(self):
        assert sanitize_resource_id("i-0abc123") == "i-0abc123"


class TestPrimitiveValue:
    """Test literal rendering of primitives."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("mystring", '"mystring"'),
            ('"mykey": "myvalue"', '"\\"mykey\\": \\"myvalue\\""'),
            ("back\\slash", '"back\\\\slash"'),
            ("line\nbreak", '"line\\nbreak"'),
            ("tab\there", '"tab\\there"'),
            ("bell\x07", '"bell\\u0007"'),
            ("ünïcode", '"ünïcode"'),
            ("", '""'),
        ],
    )
    def test_strings(self, value, expected):
        assert render_primitive_value(Primitive(value)) == expected

    def test_bools_are_quoted(self):
        assert render_primitive_value(Primitive(True)) == '"true"'
        assert render_primitive_value(Primitive(False)) == '"false"'

    @pytest.mark.parametrize(
        "value, expected",
        [
            (0, "0"),
            (8, "8"),
            (-16, "-16"),
            (2**31 - 1, "2147483647"),
            (-(2**63), "-9223372036854775808"),
        ],
    )
    def test_ints_are_bare(self, value, expected):
        assert render_primitive_value(Primitive(value)) == expected

    def test_literal_is_emitted_as_is(self):
        assert render_primitive_value(Primitive("unknown", literal=True)) == "unknown"

    def test_interpolation_passes_through(self):
        assert quote_string("${var.name}-%{if x}") == '"${var.name}-%{if x}"'


class TestPrimitiveAttribute:
    """Test single attribute assignments."""

    def test_assignment(self):
        assert render_primitive_attribute("name", Primitive("web")) == 'name = "web"\n'

    def test_empty_date_is_suppressed(self):
        assert render_primitive_attribute("date", Primitive("")) == ""

    def test_non_empty_date_renders(self):
        assert render_primitive_attribute("date", Primitive("2018-01-01")) == 'date = "2018-01-01"\n'

    def test_empty_string_renders_for_other_names(self):
        assert render_primitive_attribute("description", Primitive("")) == 'description = ""\n'


class TestPrimitiveList:
    """Test list assignments."""

    def test_list(self):
        items = (Primitive("80"), Primitive(443), Primitive(True))

        assert render_primitive_list("ports", items) == 'ports = [\n"80",443,"true",]\n'

    def test_empty_list(self):
        assert render_primitive_list("ports", ()) == "ports = [\n]\n"


class TestMap:
    """Test map blocks."""

    def test_entries_sorted_by_key(self):
        value = MapValue({"b": Primitive("2"), "a": Primitive("1"), "C": Primitive("0")})

        assert render_map("tags", value) == 'tags {\nC = "0"\na = "1"\nb = "2"\n}\n'

    def test_empty_map(self):
        assert render_map("tags", MapValue()) == "tags {\n}\n"

    def test_nested_values(self):
        value = MapValue(
            {
                "ports": ListValue((Primitive("80"),)),
                "limits": MapValue({"cpu": Primitive(2)}),
                "date": Primitive(""),
            }
        )

        assert render_map("container", value) == 'container {\nlimits {\ncpu = 2\n}\nports = [\n"80",]\n}\n'


class TestRenderValue:
    """Test dispatch over value shapes."""

    def test_primitive(self):
        assert render_value("name", Primitive("web")) == 'name = "web"\n'

    def test_list_of_maps_repeats_block_name(self):
        value = ListValue(
            (
                MapValue({"size": Primitive("8")}),
                MapValue({"size": Primitive("16")}),
            )
        )

        assert render_value("ebs", value) == 'ebs {\nsize = "8"\n}\nebs {\nsize = "16"\n}\n'

    def test_rejects_raw_values(self):
        with pytest.raises(TypeError):
            render_value("name", "web")


class TestDependencies:
    """Test depends_on rendering."""

    def test_order_preserved(self):
        assert render_dependencies(["y", "x"]) == 'depends_on = [\n"y","x",]\n'

    def test_no_dependencies(self):
        assert render_dependencies([]) == ""


class TestRenderResourceText:
    """Test raw resource text before formatting."""

    def test_raw_text(self):
        resource = make_resource(
            {"id": "a.b.c", "name": "web", "tags.%": "1", "tags.env": "prod"},
            resource_id="a.b.c",
            dependencies=["x", "y"],
        )

        assert render_resource_text(resource) == (
            'resource "widget" "a_b_c" {\n'
            'name = "web"\n'
            'tags {\nenv = "prod"\n}\n'
            'depends_on = [\n"x","y",]\n'
            "}\n"
        )


class TestRenderResourceBlock:
    """Test complete, formatted resource rendering."""

    def test_header_uses_sanitized_id(self):
        result = render_resource_block(make_resource({}, resource_id="a.b.c"))

        assert result.startswith('resource "widget" "a_b_c" {')

    def test_formatted_output(self):
        resource = make_resource(
            {
                "id": "i-1",
                "instance_type": "t2.micro",
                "ami": "ami-1",
                "security_groups.#": "2",
                "security_groups.0": "default",
                "security_groups.1": "web",
                "ebs_block_device.#": "1",
                "ebs_block_device.0.volume_size": "8",
                "ebs_block_device.0.device_name": "/dev/sda",
                "monitoring": "false",
            },
            resource_id="i-1",
            dependencies=["aws_vpc.main", "aws_subnet.a"],
            resource_type="aws_instance",
        )
        overlay = AttributeOverlay(defaults={"region": "us-east-1"})

        result = render_resource_block(resource, overlay)

        assert result == dedent("""\
            resource "aws_instance" "i-1" {
              ami = "ami-1"

              ebs_block_device {
                device_name = "/dev/sda"
                volume_size = "8"
              }

              instance_type = "t2.micro"
              monitoring    = "false"
              region        = "us-east-1"

              security_groups = [
                "default",
                "web",
              ]

              depends_on = [
                "aws_vpc.main",
                "aws_subnet.a",
              ]
            }
            """)

    def test_empty_collections_render(self):
        resource = make_resource({"ports.#": "0", "tags.%": "0"})

        assert render_resource_block(resource) == dedent("""\
            resource "widget" "r-1" {
              ports = []

              tags {}
            }
            """)

    def test_date_carve_out(self):
        resource = make_resource({"date": "", "name": "web"})

        result = render_resource_block(resource)

        assert "date" not in result
        assert 'name = "web"' in result

    def test_deterministic(self):
        attributes = {f"attr_{i}": str(i) for i in range(20)}
        attributes.update({"tags.%": "3", "tags.z": "1", "tags.a": "2", "tags.m": "3"})
        resource = make_resource(attributes)
        reordered = make_resource(dict(reversed(list(attributes.items()))))

        assert render_resource_block(resource) == render_resource_block(resource)
        assert render_resource_block(resource) == render_resource_block(reordered)

    def test_exclusion_wins_over_default(self):
        resource = make_resource({"name": "web"})
        overlay = AttributeOverlay(defaults={"region": "us-east-1"}, excludes={"region"})

        assert "region" not in render_resource_block(resource, overlay)

    def test_caller_excludes_untouched(self):
        overlay = AttributeOverlay(excludes={"arn"})

        render_resource_block(make_resource({"id": "r-1"}), overlay)

        assert overlay.excludes == {"arn"}

    def test_custom_formatter_receives_raw_text(self):
        seen = []

        def formatter(text):
            seen.append(text)
            return "formatted\n"

        result = render_resource_block(make_resource({"name": "web"}), formatter=formatter)

        assert result == "formatted\n"
        assert seen == ['resource "widget" "r-1" {\nname = "web"\n}\n']

    def test_format_error_carries_raw_text(self):
        resource = make_resource({"timeouts/create": "10m"})

        with pytest.raises(FormatError) as exc_info:
            render_resource_block(resource)

        assert exc_info.value.raw_text == render_resource_text(resource)
        assert 'timeouts/create = "10m"' in exc_info.value.raw_text

    def test_interpolation_in_default_is_kept(self):
        resource = make_resource({"id": "r-1"})
        overlay = AttributeOverlay(defaults={"subnet_id": "${aws_subnet.a.id}"})

        result = render_resource_block(resource, overlay)

        assert result == 'resource "widget" "r-1" {\n  subnet_id = "${aws_subnet.a.id}"\n}\n'

    def test_map_keys_that_are_not_identifiers(self):
        resource = make_resource(
            {
                "tags.%": "2",
                "tags.Name": "web",
                "tags.aws:cloudformation:stack-name": "stack",
            }
        )
        key = '"aws:cloudformation:stack-name"'

        result = render_resource_block(resource)

        assert result == (
            'resource "widget" "r-1" {\n'
            "  tags {\n"
            f'    {"Name".ljust(len(key))} = "web"\n'
            f'    {key} = "stack"\n'
            "  }\n"
            "}\n"
        )


class TestRenderKey:
    """Test map key rendering."""

    @pytest.mark.parametrize("key", ["Name", "team_1", "stack-name", "_private"])
    def test_identifiers_stay_bare(self, key):
        assert render_key(key) == key

    @pytest.mark.parametrize(
        "key, expected",
        [
            ("aws:cloudformation:stack-name", '"aws:cloudformation:stack-name"'),
            ("1st", '"1st"'),
            ("with space", '"with space"'),
            ("", '""'),
        ],
    )
    def test_other_keys_are_quoted(self, key, expected):
        assert render_key(key) == expected

    def test_render_map_quotes_keys(self):
        value = MapValue({"kubernetes/role": Primitive("master"), "env": Primitive("prod")})

        assert render_map("tags", value) == 'tags {\nenv = "prod"\n"kubernetes/role" = "master"\n}\n'
