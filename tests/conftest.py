"""
Test configuration and fixtures.

Real documents are generated with python-pptx / python-docx; malformed
archives are assembled by hand with zipfile.
"""

import io
import zipfile

import pytest
from PIL import Image

PPTX_MIME = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

CONTENT_TYPES = '<?xml version="1.0" encoding="UTF-8"?><Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types"/>'
PRESENTATION = '<?xml version="1.0" encoding="UTF-8"?><p:presentation xmlns:p="http://schemas.openxmlformats.org/presentationml/2006/main"/>'

SLIDE_TEMPLATE = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    '<p:sld xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" '
    'xmlns:p="http://schemas.openxmlformats.org/presentationml/2006/main" '
    'xmlns:r="http://schemas.openxmlformats.org/officeDocument/2006/relationships">'
    "<p:cSld><p:spTree>{shapes}</p:spTree></p:cSld></p:sld>"
)

WORD_TEMPLATE = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main" '
    'xmlns:r="http://schemas.openxmlformats.org/officeDocument/2006/relationships" '
    'xmlns:wp="http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing" '
    'xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" '
    'xmlns:wps="http://schemas.microsoft.com/office/word/2010/wordprocessingShape" '
    'xmlns:mc="http://schemas.openxmlformats.org/markup-compatibility/2006" '
    'xmlns:v="urn:schemas-microsoft-com:vml">'
    "<w:body>{body}</w:body></w:document>"
)

WORD_CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '<Default Extension="png" ContentType="image/png"/>'
    '<Override PartName="/word/document.xml" '
    'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>'
    '<Override PartName="/word/styles.xml" '
    'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.styles+xml"/>'
    "</Types>"
)

RELS_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
REL_TYPE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/"

PACKAGE_RELS = (
    f'<?xml version="1.0" encoding="UTF-8"?><Relationships xmlns="{RELS_NS}">'
    f'<Relationship Id="rId1" Type="{REL_TYPE}officeDocument" Target="word/document.xml"/>'
    "</Relationships>"
)


def word_style(style_id, name, based_on=None, outline_level=None):
    """A paragraph style definition for word/styles.xml."""
    based_xml = f'<w:basedOn w:val="{based_on}"/>' if based_on else ""
    outline_xml = f'<w:pPr><w:outlineLvl w:val="{outline_level}"/></w:pPr>' if outline_level is not None else ""
    return (
        f'<w:style w:type="paragraph" w:styleId="{style_id}">'
        f'<w:name w:val="{name}"/>{based_xml}{outline_xml}</w:style>'
    )


DEFAULT_WORD_STYLES = (
    '<w:style w:type="paragraph" w:default="1" w:styleId="Normal"><w:name w:val="Normal"/></w:style>'
    + word_style("Heading1", "heading 1", based_on="Normal")
    + word_style("Heading2", "heading 2", based_on="Normal")
    + word_style("Title", "Title", based_on="Normal")
    + word_style("ListParagraph", "List Paragraph", based_on="Normal")
)


def make_png(color=(255, 0, 0), size=(4, 3)):
    """Encode a solid-color PNG."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def build_zip(entries):
    """Build a stored (uncompressed) ZIP from a name -> str/bytes mapping."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_STORED) as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return buffer.getvalue()


def title_shape(text, ph_type="title"):
    return (
        f'<p:sp><p:nvSpPr><p:cNvPr id="2" name="Title"/><p:cNvSpPr/>'
        f'<p:nvPr><p:ph type="{ph_type}"/></p:nvPr></p:nvSpPr><p:spPr/>'
        f"<p:txBody><a:bodyPr/><a:p><a:r><a:t>{text}</a:t></a:r></a:p></p:txBody></p:sp>"
    )


def text_shape(*paragraphs):
    runs = "".join(f"<a:p><a:r><a:t>{p}</a:t></a:r></a:p>" for p in paragraphs)
    return (
        '<p:sp><p:nvSpPr><p:cNvPr id="3" name="Body"/><p:cNvSpPr/><p:nvPr/></p:nvSpPr>'
        f"<p:spPr/><p:txBody><a:bodyPr/>{runs}</p:txBody></p:sp>"
    )


def slide_xml(*shapes):
    return SLIDE_TEMPLATE.format(shapes="".join(shapes))


def build_raw_pptx(slides, extra=None):
    """Hand-assembled presentation: slides maps entry number -> slide XML (str or bytes)."""
    entries = {"[Content_Types].xml": CONTENT_TYPES, "ppt/presentation.xml": PRESENTATION}
    for number, xml in slides.items():
        entries[f"ppt/slides/slide{number}.xml"] = xml
    entries.update(extra or {})
    return build_zip(entries)


def word_paragraph(text, style=None, numbered=False):
    props = ""
    if style or numbered:
        style_xml = f'<w:pStyle w:val="{style}"/>' if style else ""
        num_xml = '<w:numPr><w:ilvl w:val="0"/><w:numId w:val="1"/></w:numPr>' if numbered else ""
        props = f"<w:pPr>{style_xml}{num_xml}</w:pPr>"
    return f"<w:p>{props}<w:r><w:t>{text}</w:t></w:r></w:p>"


def build_raw_docx(body, extra=None, styles=DEFAULT_WORD_STYLES, relationships=""):
    """
    Hand-assembled word-processor package with the given body XML.

    styles is the inner XML of word/styles.xml; relationships is extra
    <Relationship> XML for word/_rels/document.xml.rels.
    """
    document_rels = (
        f'<?xml version="1.0" encoding="UTF-8"?><Relationships xmlns="{RELS_NS}">'
        f'<Relationship Id="rIdStyles" Type="{REL_TYPE}styles" Target="styles.xml"/>'
        f"{relationships}</Relationships>"
    )
    entries = {
        "[Content_Types].xml": WORD_CONTENT_TYPES,
        "_rels/.rels": PACKAGE_RELS,
        "word/document.xml": WORD_TEMPLATE.format(body=body),
        "word/_rels/document.xml.rels": document_rels,
        "word/styles.xml": (
            '<?xml version="1.0" encoding="UTF-8"?>'
            '<w:styles xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
            f"{styles}</w:styles>"
        ),
    }
    entries.update(extra or {})
    return build_zip(entries)


def build_pptx(titles, bodies=None, notes=None, images_per_slide=0, core_title=None):
    """Generate a presentation with python-pptx (Title and Content layout)."""
    from pptx import Presentation
    from pptx.util import Inches

    prs = Presentation()
    color = 0
    for index, title in enumerate(titles):
        slide = prs.slides.add_slide(prs.slide_layouts[1])
        slide.shapes.title.text = title
        if bodies and bodies[index]:
            slide.placeholders[1].text = bodies[index]
        if notes and notes[index]:
            slide.notes_slide.notes_text_frame.text = notes[index]
        for _ in range(images_per_slide):
            color += 1
            png = make_png((color * 10 % 256, color * 7 % 256, 0))
            slide.shapes.add_picture(io.BytesIO(png), Inches(1), Inches(1))
    if core_title is not None:
        prs.core_properties.title = core_title

    buffer = io.BytesIO()
    prs.save(buffer)
    return buffer.getvalue()


def build_docx(blocks, images=0, core_title=None, author=None):
    """
    Generate a document with python-docx.

    blocks is a list of ("heading", text, level) / ("paragraph", text) tuples.
    """
    from docx import Document
    from docx.shared import Inches

    doc = Document()
    for block in blocks:
        if block[0] == "heading":
            doc.add_heading(block[1], level=block[2])
        else:
            doc.add_paragraph(block[1])
    for index in range(images):
        png = make_png((index * 40 % 256, 255 - index * 30, 10))
        doc.add_picture(io.BytesIO(png), width=Inches(1))
    if core_title is not None:
        doc.core_properties.title = core_title
    if author is not None:
        doc.core_properties.author = author

    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def set_encrypted_flag(data):
    """Mark every entry of a stored ZIP as encrypted (general purpose flag bit 0)."""
    raw = bytearray(data)
    for signature, offset in ((b"PK\x03\x04", 6), (b"PK\x01\x02", 8)):
        start = raw.find(signature)
        while start != -1:
            raw[start + offset] |= 0x1
            start = raw.find(signature, start + 4)
    return bytes(raw)


def encrypted_ole_package():
    """OLE compound-file envelope of a password-protected OOXML file."""
    header = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 504
    return header + "EncryptedPackage".encode("utf-16-le") + b"\x00" * 512


@pytest.fixture
def three_slide_pptx():
    return build_pptx(["Intro", "Body", "Summary"])


@pytest.fixture
def headed_docx():
    return build_docx(
        [
            ("paragraph", "This report opens with some context before any heading."),
            ("heading", "Overview", 1),
            ("paragraph", "The overview paragraph."),
            ("heading", "Details", 1),
            ("paragraph", "The details paragraph."),
        ]
    )
