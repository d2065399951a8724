from types import SimpleNamespace

import pytest
from bs4 import BeautifulSoup

from spiderling import tag_parsers as tp
from spiderling.extensions import Validator
from spiderling.navigation import HttpRequest, HttpResponse, Response

BASE = "https://security-crawl-maze.app/html/body/xyz/"


def maze(path):
    return "https://security-crawl-maze.app" + path


def make_response(html, **kwargs):
    return Response(
        resp=HttpResponse(request=HttpRequest(url=BASE)),
        document=BeautifulSoup(html, "html.parser"),
        **kwargs,
    )


def urls(parser, html, **kwargs):
    found = []
    parser(make_response(html, **kwargs), found.append)
    return [request.url for request in found]


@pytest.mark.parametrize(
    "parser, html, expected",
    [
        (tp.body_a_tag_parser, "<a href=/test/html/body/a/href.found>", "/test/html/body/a/href.found"),
        (tp.body_a_tag_parser, "<a ping=/test/html/body/a/ping.found>", "/test/html/body/a/ping.found"),
        (
            tp.body_background_tag_parser,
            '<body background="/test/html/body/background.found"></body>',
            "/test/html/body/background.found",
        ),
        (
            tp.body_blockquote_cite_tag_parser,
            '<blockquote cite="/test/html/body/blockquote/cite.found"></blockquote>',
            "/test/html/body/blockquote/cite.found",
        ),
        (
            tp.body_map_area_ping_tag_parser,
            '<map name="map">\n<area ping="/test/html/body/map/area/ping.found" shape="rect" '
            'coords="0,0,150,150" href="#">\n</map>',
            "/test/html/body/map/area/ping.found",
        ),
        (
            tp.body_audio_tag_parser,
            '<audio src="/test/html/body/audio/src.found"></audio>',
            "/test/html/body/audio/src.found",
        ),
        (
            tp.body_audio_tag_parser,
            '<audio controls><source src="/test/html/body/audio/source/src.found" type="audio/mpeg"></audio>',
            "/test/html/body/audio/source/src.found",
        ),
        (
            tp.body_img_tag_parser,
            '<img dynsrc="/test/html/body/img/dynsrc.found">',
            "/test/html/body/img/dynsrc.found",
        ),
        (
            tp.body_img_tag_parser,
            '<img alt="" src="#" longdesc="/test/html/body/img/longdesc.found">',
            "/test/html/body/img/longdesc.found",
        ),
        (
            tp.body_img_tag_parser,
            '<img lowsrc="/test/html/body/img/lowsrc.found">',
            "/test/html/body/img/lowsrc.found",
        ),
        (
            tp.body_img_tag_parser,
            '<img src="/test/html/body/img/src.found">',
            "/test/html/body/img/src.found",
        ),
        (
            tp.body_object_tag_parser,
            '<object data="/test/html/body/object/data.found"></object>',
            "/test/html/body/object/data.found",
        ),
        (
            tp.body_object_tag_parser,
            '<object codebase="/test/html/body/object/codebase.found"></object>',
            "/test/html/body/object/codebase.found",
        ),
        (
            tp.body_object_tag_parser,
            '<object classid="clsid:6BF52A52-394A-11d3-B153-00C04F79FAA6">\n'
            '<param name="ref" value="/test/html/body/object/param/value.found"></param>\n</object>',
            "/test/html/body/object/param/value.found",
        ),
        (
            tp.body_svg_tag_parser,
            '<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink">\n'
            '<image xlink:href="/test/html/body/svg/image/xlink.found"/>\n</svg>',
            "/test/html/body/svg/image/xlink.found",
        ),
        (
            tp.body_svg_tag_parser,
            '<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink">\n'
            '<script xlink:href="/test/html/body/svg/script/xlink.found"></script>\n</svg>',
            "/test/html/body/svg/script/xlink.found",
        ),
        (
            tp.body_table_tag_parser,
            '<table background="/test/html/body/table/background.found"></table>',
            "/test/html/body/table/background.found",
        ),
        (
            tp.body_table_tag_parser,
            '<table>\n<tr>\n<td background="/test/html/body/table/td/background.found"></td>\n</tr>\n</table>',
            "/test/html/body/table/td/background.found",
        ),
        (
            tp.body_video_tag_parser,
            '<video poster="/test/html/body/video/poster.found"></video>',
            "/test/html/body/video/poster.found",
        ),
        (
            tp.body_video_tag_parser,
            '<video src="/test/html/body/video/src.found"></video>',
            "/test/html/body/video/src.found",
        ),
        (
            tp.body_video_tag_parser,
            '<video width="320" height="240" controls>\n<track src="/test/html/body/video/track/src.found" '
            'kind="subtitles" srclang="en" label="English">\n</video>',
            "/test/html/body/video/track/src.found",
        ),
        (
            tp.body_applet_tag_parser,
            '<applet archive="/test/html/body/applet/archive.found"></applet>',
            "/test/html/body/applet/archive.found",
        ),
        (
            tp.body_applet_tag_parser,
            '<applet code = "Test" codebase="/test/html/body/applet/codebase.found"></applet>',
            "/test/html/body/applet/codebase.found",
        ),
        (
            tp.body_link_href_tag_parser,
            '<link rel="stylesheet" href="/css/font-face.css">',
            "/css/font-face.css",
        ),
        (
            tp.body_link_href_tag_parser,
            '<link rel="prefetch" href="/test/html/head/link/href.found" />',
            "/test/html/head/link/href.found",
        ),
        (
            tp.body_base_href_tag_parser,
            '<base href="/test/html/head/base/href.found">',
            "/test/html/head/base/href.found",
        ),
        (
            tp.body_html_manifest_tag_parser,
            '<html xmlns="http://www.w3.org/1999/xhtml" manifest="/test/html/manifest.found">',
            "/test/html/manifest.found",
        ),
        (
            tp.body_html_doctype_tag_parser,
            '<!DOCTYPE html SYSTEM "/test/html/doctype.found">\n<meta charset="utf-8">',
            "/test/html/doctype.found",
        ),
        (
            tp.body_import_implementation_tag_parser,
            '<IMPORT namespace="myNS" implementation="/test/html/head/import/implementation.found" /></IMPORT>',
            "/test/html/head/import/implementation.found",
        ),
        (
            tp.body_embed_tag_parser,
            '<embed src="/test/html/body/embed/src.found"></embed>',
            "/test/html/body/embed/src.found",
        ),
        (
            tp.body_iframe_tag_parser,
            '<iframe src="/test/html/body/iframe/src.found"></iframe>',
            "/test/html/body/iframe/src.found",
        ),
        (
            tp.body_input_src_tag_parser,
            '<input type="image" src="/test/html/body/input/src.found" name="test" value="test">',
            "/test/html/body/input/src.found",
        ),
        (
            tp.body_isindex_action_tag_parser,
            '<isindex action="/test/html/body/isindex/action.found"></isindex>',
            "/test/html/body/isindex/action.found",
        ),
        (
            tp.body_script_src_tag_parser,
            '<script src="/test/html/body/script/src.found"></script>',
            "/test/html/body/script/src.found",
        ),
        (
            tp.body_button_formaction_tag_parser,
            '<form id="test"><button form="test" formaction="/test/html/body/form/button/formaction.found" '
            'type="submit">CLICKME</button></form>',
            "/test/html/body/form/button/formaction.found",
        ),
    ],
)
def test_body_parsers_find_endpoint(parser, html, expected):
    assert urls(parser, html)[-1] == maze(expected)


def test_audio_source_srcset():
    html = """<audio controls>
    <source srcset="/test/html/body/audio/source/srcset1x.found 1x,
                    /test/html/body/audio/source/srcset2x.found 2x">
    </audio>"""
    found = []
    tp.body_audio_tag_parser(make_response(html), found.append)
    assert sorted(request.url for request in found) == [
        maze("/test/html/body/audio/source/srcset1x.found"),
        maze("/test/html/body/audio/source/srcset2x.found"),
    ]


def test_img_srcset():
    html = """<img srcset="/test/html/body/img/srcset1x.found 1x,
        /test/html/body/img/srcset2x.found 2x">"""
    found = []
    tp.body_img_tag_parser(make_response(html), found.append)
    assert sorted(request.url for request in found) == [
        maze("/test/html/body/img/srcset1x.found"),
        maze("/test/html/body/img/srcset2x.found"),
    ]


@pytest.mark.parametrize("parser", [tp.body_frame_tag_parser, tp.body_frame_src_tag_parser])
def test_frame_parsers(parser):
    html = '<frameset><frame src="/test/html/body/frameset/frame/src.found"></frame></frameset>'
    assert urls(parser, html) == [maze("/test/html/body/frameset/frame/src.found")]


def test_img_longdesc_skips_hash_src():
    html = '<img alt="" src="#" longdesc="/test/html/body/img/longdesc.found">'
    found = []
    tp.body_img_tag_parser(make_response(html), found.append)
    assert [request.url for request in found] == [maze("/test/html/body/img/longdesc.found")]


def test_img_data_src_is_skipped_with_its_srcset():
    html = '<img src="data:image/png;base64,AAAA" srcset="/a.found 1x">'
    found = []
    tp.body_img_tag_parser(make_response(html), found.append)
    assert [request.url for request in found] == []


def test_request_metadata():
    found = []
    tp.body_a_tag_parser(
        make_response('<a href="/x.found">x</a>', depth=3, root_hostname="security-crawl-maze.app"),
        found.append,
    )
    assert len(found) == 1
    request = found[0]
    assert (request.method, request.tag, request.attribute) == ("GET", "a", "href")
    assert request.source == BASE
    assert request.depth == 3
    assert request.root_hostname == "security-crawl-maze.app"


def test_empty_attribute_is_ignored():
    found = []
    tp.body_a_tag_parser(make_response('<a href="">x</a>'), found.append)
    assert [request.url for request in found] == []


def test_input_type_is_case_insensitive():
    html = '<input type="IMAGE" src="/in.found"><input type="text" src="/no.found">'
    found = []
    tp.body_input_src_tag_parser(make_response(html), found.append)
    assert [request.url for request in found] == [maze("/in.found")]


def test_iframe_srcdoc_endpoints():
    html = "<iframe srcdoc=\"<img src='/test/srcdoc.html'>\"></iframe>"
    found = []
    tp.body_iframe_tag_parser(make_response(html), found.append)
    assert [request.url for request in found] == [maze("/test/srcdoc.html")]
    assert found[0].attribute == "srcdoc"


def test_meta_content_endpoints():
    html = '<meta name="x" content="go to /test/page.php now">'
    found = []
    tp.body_meta_content_tag_parser(make_response(html), found.append)
    assert [request.url for request in found] == [maze("/test/page.php")]
    assert (found[0].tag, found[0].attribute) == ("meta", "refresh")


def test_doctype_with_public_identifier_is_ignored():
    html = '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0//EN" "/dtd.found">\n<p>x</p>'
    found = []
    tp.body_html_doctype_tag_parser(make_response(html), found.append)
    assert [request.url for request in found] == []


def test_extension_validator_blanks_denied_paths():
    options = SimpleNamespace(extensions_validator=Validator())
    found = []
    tp.body_img_tag_parser(make_response('<img src="/picture.png">', options=options), found.append)
    assert [request.url for request in found] == [""]


def test_object_tag_name_is_src():
    found = []
    tp.body_object_tag_parser(make_response('<object data="/o.found"></object>'), found.append)
    assert [(request.tag, request.attribute) for request in found] == [("src", "data")]