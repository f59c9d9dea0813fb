from core.limits import Limit, format_limits, limits_for_channel, next_custom_id, parse_limits


SAMPLE = """
<threshold>
<id>101</id>
<type>2</type>
<refd>true</refd>
<pos_start>120.50</pos_start>
<pos_stop>340.00</pos_stop>
<value>65.00</value>
<tolerance>3</tolerance>
</threshold>

<threshold>
<id>305</id>
<pos_start>10</pos_start>
<pos_stop>20</pos_stop>
<value>40.5</value>
</threshold>

<threshold>
<id>102</id>
<pos_start>10</pos_start>
<value>40.5</value>
</threshold>

<threshold>
<id>abc</id>
<pos_start>10</pos_start>
<pos_stop>20</pos_stop>
<value>40.5</value>
</threshold>
"""


def test_parse_limits_applies_defaults_and_skips_incomplete():
    limits = parse_limits(SAMPLE)
    assert limits == [
        Limit(custom_id=101, start=120.5, end=340.0, threshold=65.0, tolerance=3, type=2),
        Limit(custom_id=305, start=10.0, end=20.0, threshold=40.5, tolerance=5, type=3),
    ]


def test_format_limits_export_layout():
    text = format_limits([Limit(custom_id=110, start=1.0, end=2.5, threshold=70.0)])
    assert text == (
        "<threshold>\n"
        "<id>110</id>\n"
        "<type>3</type>\n"
        "<refd>true</refd>\n"
        "<pos_start>1.00</pos_start>\n"
        "<pos_stop>2.50</pos_stop>\n"
        "<value>70.00</value>\n"
        "<tolerance>5</tolerance>\n"
        "</threshold>"
    )
    assert parse_limits(text)[0].custom_id == 110


def test_format_limits_separates_blocks():
    limits = parse_limits(SAMPLE)
    assert format_limits(limits).count("</threshold>\n\n<threshold>") == 1
    assert format_limits([]) == ""


def test_limits_for_channel():
    limits = [
        Limit(custom_id=150, start=0, end=1, threshold=1),
        Limit(custom_id=299, start=0, end=1, threshold=1),
        Limit(custom_id=300, start=0, end=1, threshold=1),
        Limit(custom_id=50, start=0, end=1, threshold=1),
    ]
    assert [lim.custom_id for lim in limits_for_channel(limits, "1")] == [299, 150]
    assert [lim.custom_id for lim in limits_for_channel(limits, 2)] == [300]
    assert [lim.custom_id for lim in limits_for_channel(limits, "9")] == [300, 299, 150, 50]


def test_next_custom_id():
    assert next_custom_id([]) == 100
    assert next_custom_id([Limit(custom_id=42, start=0, end=1, threshold=1)]) == 100
    assert next_custom_id([Limit(custom_id=512, start=0, end=1, threshold=1)]) == 513
