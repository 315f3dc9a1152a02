from persontags.xmp_parser import XMPHeuristicDecoder, local_name

from builders import RDF_NS, hierarchical_xmp, subject_xmp, xmp_packet
from persontags.segment_locator import find_xmp_chunk

MWG_NS = (
    'xmlns:mwg-rs="http://www.metadataworkinggroup.com/schemas/regions/" '
    'xmlns:stArea="http://ns.adobe.com/xmp/sType/Area#"'
)
MP_NS = (
    'xmlns:MP="http://ns.microsoft.com/photo/1.2/" '
    'xmlns:MPRI="http://ns.microsoft.com/photo/1.2/t/RegionInfo#" '
    'xmlns:MPReg="http://ns.microsoft.com/photo/1.2/t/Region#"'
)


def decode(packet: str):
    chunk = find_xmp_chunk(packet.encode("utf-8"))
    return XMPHeuristicDecoder(chunk.text).decode()


def test_dc_subject_keywords():
    assert decode(subject_xmp("Alice", "Bob")) == ([], ["Alice", "Bob"])


def test_subject_items_are_trimmed_and_empty_dropped():
    assert decode(subject_xmp("  Alice ", "   ")) == ([], ["Alice"])


def test_hierarchical_subject_people():
    persons, keywords = decode(hierarchical_xmp("People|Alice", "Places|Paris", "Nothing"))
    assert persons == ["Alice"]
    assert keywords == []


def test_hierarchical_subject_takes_leaf_and_cjk_categories():
    persons, _ = decode(hierarchical_xmp("People|Family|Bob", "人物|张三", "家人|李四", "Person| Carol "))
    assert persons == ["Bob", "张三", "李四", "Carol"]


def test_mwg_regions_name_element_and_attribute():
    body = (
        '<mwg-rs:Regions rdf:parseType="Resource">'
        '<mwg-rs:RegionList><rdf:Bag>'
        '<rdf:li rdf:parseType="Resource"><mwg-rs:Name>Carol</mwg-rs:Name>'
        '<mwg-rs:Type>Face</mwg-rs:Type></rdf:li>'
        '<rdf:li><rdf:Description mwg-rs:Name="Dave" mwg-rs:Type="Face" mwg-rs:NameVisible="true"/></rdf:li>'
        '</rdf:Bag></mwg-rs:RegionList>'
        '</mwg-rs:Regions>'
    )
    persons, keywords = decode(xmp_packet(body, MWG_NS))
    assert set(persons) == {"Carol", "Dave"}
    assert "true" not in persons
    assert "Face" not in persons
    assert keywords == []


def test_microsoft_region_person_display_name():
    body = (
        '<MP:RegionInfo rdf:parseType="Resource"><MPRI:Regions><rdf:Bag>'
        '<rdf:li MPReg:PersonDisplayName="Eve" MPReg:Rectangle="0.1, 0.2, 0.3, 0.4"/>'
        '<rdf:li rdf:parseType="Resource"><MPReg:PersonDisplayName>Frank</MPReg:PersonDisplayName></rdf:li>'
        '</rdf:Bag></MPRI:Regions></MP:RegionInfo>'
    )
    persons, _ = decode(xmp_packet(body, MP_NS))
    assert set(persons) == {"Eve", "Frank"}


def test_digikam_tags_list():
    body = (
        '<digiKam:TagsList><rdf:Seq>'
        '<rdf:li>People/Frank</rdf:li><rdf:li>Events/Party</rdf:li><rdf:li>Untagged</rdf:li>'
        '</rdf:Seq></digiKam:TagsList>'
    )
    persons, _ = decode(xmp_packet(body, 'xmlns:digiKam="http://www.digikam.org/ns/1.0/"'))
    assert persons == ["Frank"]


def test_tags_list_does_not_accept_bare_person_character():
    body = '<digiKam:TagsList><rdf:Seq><rdf:li>家人/李四</rdf:li></rdf:Seq></digiKam:TagsList>'
    persons, _ = decode(xmp_packet(body, 'xmlns:digiKam="http://www.digikam.org/ns/1.0/"'))
    assert persons == []


def test_prefix_does_not_matter():
    packet = xmp_packet(
        '<foo:hierarchicalSubject><rdf:Bag><rdf:li>People|Alice</rdf:li></rdf:Bag></foo:hierarchicalSubject>'
        '<bar:subject><rdf:Bag><rdf:li>Beach</rdf:li></rdf:Bag></bar:subject>',
        'xmlns:foo="urn:example:one" xmlns:bar="urn:example:two"',
    )
    assert decode(packet) == (["Alice"], ["Beach"])


def test_multiple_rules_fire_on_one_document():
    body = (
        '<dc:subject><rdf:Bag><rdf:li>Beach</rdf:li></rdf:Bag></dc:subject>'
        '<lr:hierarchicalSubject><rdf:Bag><rdf:li>People|Alice</rdf:li></rdf:Bag></lr:hierarchicalSubject>'
    )
    namespaces = 'xmlns:dc="http://purl.org/dc/elements/1.1/" xmlns:lr="http://ns.adobe.com/lightroom/1.0/"'
    assert decode(xmp_packet(body, namespaces)) == (["Alice"], ["Beach"])


def test_malformed_xml_yields_nothing():
    assert XMPHeuristicDecoder("<x:xmpmeta><unclosed></x:xmpmeta>").decode() == ([], [])
    assert XMPHeuristicDecoder("<a:b>unbound prefix</a:b>").decode() == ([], [])
    assert XMPHeuristicDecoder("").decode() == ([], [])


def test_local_name():
    assert local_name("{%s}li" % RDF_NS) == "li"
    assert local_name("dc:subject") == "subject"
    assert local_name("Name") == "Name"


def test_empty_hierarchical_leaf_is_reported_as_empty_person():
    persons, _ = decode(hierarchical_xmp("People|", "People| ", "Places|"))
    assert persons == ["", ""]


def test_empty_tags_list_leaf_is_reported_as_empty_person():
    body = "<digiKam:TagsList><rdf:Seq><rdf:li>People/</rdf:li></rdf:Seq></digiKam:TagsList>"
    persons, _ = decode(xmp_packet(body, 'xmlns:digiKam="http://www.digikam.org/ns/1.0/"'))
    assert persons == [""]


def test_non_breaking_space_is_trimmed_from_items():
    persons, keywords = decode(xmp_packet(
        "<dc:subject><rdf:Bag><rdf:li>\xa0Beach\xa0</rdf:li></rdf:Bag></dc:subject>"
        "<lr:hierarchicalSubject><rdf:Bag><rdf:li>People|\xa0Alice</rdf:li></rdf:Bag></lr:hierarchicalSubject>",
        'xmlns:dc="http://purl.org/dc/elements/1.1/" xmlns:lr="http://ns.adobe.com/lightroom/1.0/"',
    ))
    assert persons == ["Alice"]
    assert keywords == ["Beach"]
