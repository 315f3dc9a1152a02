from persontags.segment_locator import (
    IPTCBlockStream,
    XMPChunk,
    find_photoshop_stream,
    find_xmp_chunk,
    locate_segments,
)

from builders import irb_block, iptc_keywords, photoshop_segment, subject_xmp


def test_xmpmeta_inside_xpacket_is_narrowed():
    data = b"\xff\xd8prefix" + subject_xmp("Alice").encode("utf-8") + b"suffix"
    chunk = find_xmp_chunk(data)
    assert isinstance(chunk, XMPChunk)
    assert chunk.text.startswith("<x:xmpmeta")
    assert chunk.text.endswith("</x:xmpmeta>")
    assert "Alice" in chunk.text


def test_xpacket_pair_used_when_xmpmeta_missing():
    data = b'junk<?xpacket begin="" id="x"?><rdf:RDF/><?xpacket end="w"?>junk'
    chunk = find_xmp_chunk(data)
    assert chunk.text == '<?xpacket begin="" id="x"?><rdf:RDF/><?xpacket end'


def test_unterminated_xmpmeta_falls_through_to_xpacket():
    data = b'<?xpacket begin=""?><x:xmpmeta xmlns:x="adobe:ns:meta/"><?xpacket end="w"?>'
    chunk = find_xmp_chunk(data)
    assert chunk.text.startswith("<?xpacket begin")
    assert chunk.text.endswith("<?xpacket end")


def test_invalid_utf8_does_not_break_search():
    data = b"\xff\xfe\x80" + subject_xmp("Bob").encode("utf-8") + b"\xc3"
    assert "Bob" in find_xmp_chunk(data).text


def test_no_xmp():
    assert find_xmp_chunk(b"\xff\xd8\xff\xe0plain image") is None
    assert find_xmp_chunk(b"<x:xmpmeta but never closed") is None


def test_photoshop_stream_is_everything_after_marker():
    block = irb_block(0x0404, iptc_keywords("Carol"))
    data = b"head" + photoshop_segment(block) + b"tail"
    stream = find_photoshop_stream(data)
    assert isinstance(stream, IPTCBlockStream)
    assert stream.data == block + b"tail"


def test_photoshop_marker_requires_null_terminator():
    assert find_photoshop_stream(b"Photoshop 3.0 8BIM") is None


def test_locate_segments():
    data = subject_xmp("Alice").encode("utf-8") + photoshop_segment(b"")
    kinds = [type(segment) for segment in locate_segments(data)]
    assert kinds == [XMPChunk, IPTCBlockStream]
    assert locate_segments(b"nothing here") == []
