#!/usr/bin/env python3
"""XML members of an ODP archive rendered from the presentation model."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, List, Optional
from xml.sax.saxutils import escape

from odpgen.geometry import TextProperties, TextStyle, format_cm, format_number, media_type_for
from odpgen.style_ids import (
    DEFAULT_GRAPHIC_STYLE,
    DEFAULT_PARAGRAPH_STYLE,
    VERTICAL_ALIGN_STYLES,
    collect_paragraph_styles,
    collect_text_styles,
    paragraph_style_name,
    text_style_name,
    vertical_align_style,
)
from odpgen.zorder import KIND_TEXTBOX, sorted_elements

if TYPE_CHECKING:
    from odpgen.model import Background, Image, Presentation, Slide, TextBox

MIMETYPE = "application/vnd.oasis.opendocument.presentation"
ODF_VERSION = "1.2"

GLOBAL_BACKGROUND_STYLE = "backgroundStyle"
GLOBAL_BACKGROUND_IMAGE = "backgroundImage"
DEFAULT_PAGE_STYLE = "dp1"
MASTER_PAGE = "Default"
PAGE_LAYOUT = "PM1"

CONTENT_PATH = "content.xml"
STYLES_PATH = "styles.xml"
SETTINGS_PATH = "settings.xml"
CONFIGURATIONS_PATH = "configurations2/accelerator/current.xml"
MANIFEST_PATH = "META-INF/manifest.xml"

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>'

_NS = {
    "office": "urn:oasis:names:tc:opendocument:xmlns:office:1.0",
    "style": "urn:oasis:names:tc:opendocument:xmlns:style:1.0",
    "text": "urn:oasis:names:tc:opendocument:xmlns:text:1.0",
    "draw": "urn:oasis:names:tc:opendocument:xmlns:drawing:1.0",
    "fo": "urn:oasis:names:tc:opendocument:xmlns:xsl-fo-compatible:1.0",
    "xlink": "http://www.w3.org/1999/xlink",
    "presentation": "urn:oasis:names:tc:opendocument:xmlns:presentation:1.0",
    "svg": "urn:oasis:names:tc:opendocument:xmlns:svg-compatible:1.0",
    "config": "urn:oasis:names:tc:opendocument:xmlns:config:1.0",
    "ooo": "http://openoffice.org/2004/office",
}


# characters XML 1.0 cannot carry, even as references
_NOT_XML = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff\ud800-\udfff]")
_LINE_BREAKS = re.compile("\r\n|\r|\x0b")


def _xmlns(*prefixes: str) -> str:
    return " ".join(f'xmlns:{prefix}="{_NS[prefix]}"' for prefix in prefixes)


def _attr(value: object) -> str:
    return escape(_NOT_XML.sub("", str(value)), {'"': "&quot;"})


def text_markup(content: str) -> str:
    """Escape text for a text:span; newlines and tabs become ODF elements.

    ``\\r\\n``, a lone ``\\r`` and the vertical tab count as newlines. Other control
    characters are dropped.
    """
    text = _NOT_XML.sub("", _LINE_BREAKS.sub("\n", content))
    return escape(text).replace("\n", "<text:line-break/>").replace("\t", "<text:tab/>")


def slide_background_style(index: int) -> str:
    return f"slideBackground{index}"


def page_style_name(presentation: "Presentation", slide: "Slide") -> str:
    if slide.background is not None:
        return slide_background_style(slide.index)
    if presentation.background is not None:
        return GLOBAL_BACKGROUND_STYLE
    return DEFAULT_PAGE_STYLE


# -- content.xml ---------------------------------------------------------


def _drawing_page_style(name: str, background: "Background", fill_image_name: str) -> str:
    if background.is_image:
        fill = (
            f'draw:fill="bitmap" draw:fill-image-name="{_attr(fill_image_name)}" '
            'style:repeat="stretch" draw:background-size="border"'
        )
    else:
        fill = f'draw:fill="solid" draw:fill-color="{_attr(background.color)}"'
    return (
        f'<style:style style:family="drawing-page" style:name="{_attr(name)}">'
        f"<style:drawing-page-properties {fill} "
        'presentation:background-objects-visible="true" presentation:background-visible="false" '
        'presentation:display-header="false" presentation:display-footer="false" '
        'presentation:display-page-number="false" presentation:display-date-time="false"/>'
        "</style:style>"
    )


def _paragraph_style(name: str, properties: TextProperties) -> str:
    align = f' fo:text-align="{_attr(properties.horizontal_align)}"' if properties.horizontal_align else ""
    return (
        f'<style:style style:name="{_attr(name)}" style:family="paragraph">'
        "<style:paragraph-properties "
        f'fo:margin-left="{format_cm(properties.left_indent)}" '
        f'fo:margin-right="{format_cm(properties.right_indent)}" '
        f'fo:text-indent="{format_cm(properties.first_line_indent)}"{align}/>'
        "</style:style>"
    )


def _automatic_styles(presentation: "Presentation") -> str:
    styles: List[str] = []
    if presentation.background is not None:
        styles.append(_drawing_page_style(GLOBAL_BACKGROUND_STYLE, presentation.background, GLOBAL_BACKGROUND_IMAGE))
    for slide in presentation.slides:
        if slide.background is not None:
            name = slide_background_style(slide.index)
            styles.append(_drawing_page_style(name, slide.background, name))
    styles.append(
        f'<style:style style:name="{DEFAULT_PAGE_STYLE}" style:family="drawing-page">'
        '<style:drawing-page-properties presentation:background-visible="true" '
        'presentation:background-objects-visible="true" presentation:display-footer="true" '
        'presentation:display-page-number="false" presentation:display-date-time="true"/>'
        "</style:style>"
    )
    styles.append(
        f'<style:style style:name="{DEFAULT_GRAPHIC_STYLE}" style:family="graphic">'
        '<style:graphic-properties draw:stroke="none" draw:fill="none"/>'
        "</style:style>"
    )
    styles.append(
        f'<style:style style:name="{DEFAULT_PARAGRAPH_STYLE}" style:family="paragraph">'
        '<style:paragraph-properties fo:text-align="left"/>'
        "</style:style>"
    )
    for align, name in VERTICAL_ALIGN_STYLES.items():
        styles.append(
            f'<style:style style:name="{name}" style:family="graphic">'
            f'<style:graphic-properties draw:stroke="none" draw:fill="none" draw:textarea-vertical-align="{align}"/>'
            "</style:style>"
        )
    for name, properties in collect_paragraph_styles(presentation).items():
        styles.append(_paragraph_style(name, properties))
    return "".join(styles)


def _frame_geometry(item: "TextBox | Image") -> str:
    return (
        f'svg:width="{format_cm(item.width)}" svg:height="{format_cm(item.height)}" '
        f'svg:x="{format_cm(item.x)}" svg:y="{format_cm(item.y)}" '
        f'draw:z-index="{item.z_index}"'
    )


def _text_frame(slide_index: int, box: "TextBox") -> str:
    paragraph = paragraph_style_name(slide_index, box.z_index, box.properties)
    return (
        f'<draw:frame draw:style-name="{vertical_align_style(box.properties.vertical_align)}" draw:layer="layout" '
        f'{_frame_geometry(box)} presentation:class="outline">'
        '<draw:text-box text:anchor-type="paragraph">'
        f'<text:p text:style-name="{_attr(paragraph)}">'
        f'<text:span text:style-name="{_attr(text_style_name(box.style))}">{text_markup(box.content)}</text:span>'
        "</text:p>"
        "</draw:text-box>"
        "</draw:frame>"
    )


def _image_frame(image: "Image") -> str:
    return (
        f'<draw:frame draw:style-name="{DEFAULT_GRAPHIC_STYLE}" draw:layer="layout" '
        f'{_frame_geometry(image)} presentation:class="graphic">'
        f'<draw:image xlink:href="{_attr(image.name)}" xlink:type="simple" xlink:show="embed" xlink:actuate="onLoad"/>'
        "</draw:frame>"
    )


def _page(presentation: "Presentation", slide: "Slide") -> str:
    frames = []
    for element in sorted_elements(slide):
        if element.kind == KIND_TEXTBOX:
            frames.append(_text_frame(slide.index, element.item))
        else:
            frames.append(_image_frame(element.item))
    return (
        f'<draw:page draw:name="page{slide.index}" '
        f'draw:style-name="{page_style_name(presentation, slide)}" draw:master-page-name="{MASTER_PAGE}">'
        f"{''.join(frames)}"
        "</draw:page>"
    )


def content_xml(presentation: "Presentation") -> str:
    pages = "".join(_page(presentation, slide) for slide in presentation.slides)
    return (
        f"{XML_HEADER}"
        "<office:document-content "
        f"{_xmlns('office', 'style', 'text', 'draw', 'fo', 'xlink', 'presentation', 'svg')} "
        f'office:version="{ODF_VERSION}">'
        "<office:scripts/>"
        "<office:font-face-decls/>"
        f"<office:automatic-styles>{_automatic_styles(presentation)}</office:automatic-styles>"
        f"<office:body><office:presentation>{pages}</office:presentation></office:body>"
        "</office:document-content>"
    )


# -- styles.xml ----------------------------------------------------------


def _fill_image(name: str, href: str) -> str:
    return (
        f'<draw:fill-image draw:name="{_attr(name)}" xlink:href="{_attr(href)}" '
        'xlink:type="simple" xlink:show="embed" xlink:actuate="onLoad"/>'
    )


def _text_style(name: str, style: TextStyle) -> str:
    props = []
    if style.font_family:
        props.append(f'fo:font-family="{_attr(style.font_family)}"')
    if style.font_size:
        props.append(f'fo:font-size="{_attr(style.font_size)}"')
    if style.color:
        props.append(f'fo:color="{_attr(style.color)}"')
    if style.bold:
        props.append('fo:font-weight="bold"')
    if style.italic:
        props.append('fo:font-style="italic"')
    return (
        f'<style:style style:name="{_attr(name)}" style:family="text">'
        f"<style:text-properties{''.join(' ' + prop for prop in props)}/>"
        "</style:style>"
    )


def _master_fill(background: Optional["Background"]) -> str:
    if background is None:
        return ""
    if background.is_image:
        return (
            f' draw:fill="bitmap" draw:fill-image-name="{GLOBAL_BACKGROUND_IMAGE}" '
            'style:repeat="stretch" draw:background-size="border"'
        )
    return f' draw:fill="solid" draw:fill-color="{_attr(background.color)}"'


def styles_xml(presentation: "Presentation") -> str:
    declarations: List[str] = []
    if presentation.background is not None and presentation.background.is_image:
        declarations.append(_fill_image(GLOBAL_BACKGROUND_IMAGE, presentation.background.name))
    for slide in presentation.slides:
        if slide.background is not None and slide.background.is_image:
            declarations.append(_fill_image(slide_background_style(slide.index), slide.background.name))
    for name, style in collect_text_styles(presentation).items():
        declarations.append(_text_style(name, style))
    size = presentation.slide_size
    return (
        f"{XML_HEADER}"
        "<office:document-styles "
        f"{_xmlns('office', 'style', 'text', 'draw', 'presentation', 'fo', 'svg', 'xlink')} "
        f'office:version="{ODF_VERSION}">'
        f"<office:styles>{''.join(declarations)}</office:styles>"
        "<office:automatic-styles>"
        f'<style:page-layout style:name="{PAGE_LAYOUT}">'
        '<style:page-layout-properties fo:margin-top="0cm" fo:margin-bottom="0cm" '
        'fo:margin-left="0cm" fo:margin-right="0cm" style:print-orientation="landscape" '
        f'fo:page-width="{format_number(size.width)}cm" fo:page-height="{format_number(size.height)}cm"/>'
        "</style:page-layout>"
        "</office:automatic-styles>"
        "<office:master-styles>"
        f'<style:master-page style:name="{MASTER_PAGE}" style:page-layout-name="{PAGE_LAYOUT}">'
        '<style:drawing-page-properties presentation:background-visible="true" '
        f'presentation:background-objects-visible="true"{_master_fill(presentation.background)}/>'
        "</style:master-page>"
        "</office:master-styles>"
        "</office:document-styles>"
    )


# -- settings.xml --------------------------------------------------------


def _config_item(name: str, kind: str, value: object) -> str:
    return f'<config:config-item config:name="{name}" config:type="{kind}">{_attr(value)}</config:config-item>'


def settings_xml(presentation: "Presentation") -> str:
    size = presentation.slide_size
    view = "".join(
        [
            _config_item("VisibleAreaTop", "int", 0),
            _config_item("VisibleAreaLeft", "int", 0),
            _config_item("VisibleAreaWidth", "int", f"{size.width * 100:.0f}"),
            _config_item("VisibleAreaHeight", "int", f"{size.height * 100:.0f}"),
            '<config:config-item-map-indexed config:name="Views"><config:config-item-map-entry>',
            _config_item("ViewId", "string", "view1"),
            _config_item("GridIsVisible", "boolean", "false"),
            _config_item("IsSnapToGrid", "boolean", "true"),
            _config_item("IsSnapToPageMargins", "boolean", "true"),
            _config_item("ZoomOnPage", "boolean", "true"),
            _config_item("SelectedPage", "short", 0),
            "</config:config-item-map-entry></config:config-item-map-indexed>",
        ]
    )
    configuration = "".join(
        [
            _config_item("IsPrintDate", "boolean", "false"),
            _config_item("IsPrintTime", "boolean", "false"),
            _config_item("IsPrintNotes", "boolean", "false"),
            _config_item("PrintQuality", "int", 0),
            '<config:config-item-map-indexed config:name="ForbiddenCharacters"><config:config-item-map-entry>',
            _config_item("Language", "string", presentation.config.language),
            _config_item("Country", "string", presentation.config.country),
            '<config:config-item config:name="Variant" config:type="string"/>',
            "</config:config-item-map-entry></config:config-item-map-indexed>",
        ]
    )
    return (
        f"{XML_HEADER}"
        f"<office:document-settings {_xmlns('office', 'xlink', 'config', 'ooo')} office:version=\"{ODF_VERSION}\">"
        "<office:settings>"
        f'<config:config-item-set config:name="ooo:view-settings">{view}</config:config-item-set>'
        f'<config:config-item-set config:name="ooo:configuration-settings">{configuration}</config:config-item-set>'
        "</office:settings>"
        "</office:document-settings>"
    )


# -- configurations2 -----------------------------------------------------


def configurations_xml(presentation: "Presentation | None" = None) -> str:
    return """<?xml version="1.0" encoding="UTF-8"?>
<oor:component-data xmlns:oor="http://openoffice.org/2001/registry" xmlns:xs="http://www.w3.org/2001/XMLSchema" oor:name="Accelerator" oor:package="org.openoffice.Office">
  <node oor:name="PresentationCommands">
    <node oor:name="Defaults">
      <node oor:name="Modules">
        <node oor:name="com.sun.star.presentation.PresentationDocument"/>
      </node>
    </node>
  </node>
</oor:component-data>"""


# -- META-INF/manifest.xml -----------------------------------------------


def _manifest_entry(path: str, media_type: str, extra: str = "") -> str:
    return f'<manifest:file-entry manifest:full-path="{_attr(path)}" manifest:media-type="{_attr(media_type)}"{extra}/>'


def manifest_xml(presentation: "Presentation") -> str:
    entries = [
        _manifest_entry("/", MIMETYPE, f' manifest:version="{ODF_VERSION}"'),
        _manifest_entry(CONTENT_PATH, "text/xml"),
        _manifest_entry(STYLES_PATH, "text/xml"),
        _manifest_entry(SETTINGS_PATH, "text/xml"),
        _manifest_entry(CONFIGURATIONS_PATH, "text/xml"),
    ]
    for name, _ in presentation.iter_embedded_media():
        entries.append(_manifest_entry(name, media_type_for(name)))
    return (
        f"{XML_HEADER}"
        '<manifest:manifest xmlns:manifest="urn:oasis:names:tc:opendocument:xmlns:manifest:1.0" '
        f'manifest:version="{ODF_VERSION}">'
        f"{''.join(entries)}"
        "</manifest:manifest>"
    )
