"""Test the slide -> page conversion used by export."""

import httpx
import pytest

from slide_editor.assets import ImageLoader
from slide_editor.commands import AddElement, AddSlide
from slide_editor.history import HistoryManager
from slide_editor.models import (
    ColorBackground,
    ImageBackground,
    ImageElement,
    Position,
    Presentation,
    Size,
    Slide,
    TextElement,
)
from slide_editor.page_renderer import (
    WHITE,
    DrawImage,
    DrawText,
    FillRect,
    PageRenderer,
    flip_y,
    hex_to_rgb,
)


def text(id_="t1", x=0, y=0, w=100, h=50, **kw):
    return TextElement(id=id_, position=Position(x, y), size=Size(w, h), content=kw.pop("content", "Hi"), **kw)


def test_hex_to_rgb():
    r, g, b = hex_to_rgb("#FF00AA")
    assert (r, g, b) == (1.0, 0.0, 170 / 255)
    assert round(b, 3) == 0.667
    assert hex_to_rgb("#ffffff") == (1.0, 1.0, 1.0)


@pytest.mark.parametrize(
    "bad",
    ["", "#FFF", "#GGGGGG", "red", "FF00AA", "##FF00AA", "# F00AA", "#-1FFFF", "#FF00AA\n"],
)
def test_hex_to_rgb_malformed_is_black(bad):
    assert hex_to_rgb(bad) == (0.0, 0.0, 0.0)


def test_flip_y():
    assert flip_y(0, 50, 600) == 550
    assert flip_y(10, 20, 600) == 570
    # taller than the page goes below the bottom edge
    assert flip_y(100, 700, 600) == -200


@pytest.mark.asyncio
async def test_color_background_fills_page():
    slide = Slide(id="s", background=ColorBackground("#FF00AA"))
    async with ImageLoader() as loader:
        page = await PageRenderer(loader).render_slide(slide)
    assert page.width == 1000 and page.height == 600
    assert page.operations == [FillRect(0, 0, 1000, 600, hex_to_rgb("#FF00AA"))]


@pytest.mark.asyncio
async def test_text_element_is_flipped():
    slide = Slide(id="s", elements=(text(font_size=24, font_color="#00FF00"),))
    async with ImageLoader() as loader:
        page = await PageRenderer(loader).render_slide(slide)
    [draw] = page.texts
    assert draw == DrawText("Hi", 0, 550, 24, (0.0, 1.0, 0.0), element_id="t1")


@pytest.mark.asyncio
async def test_custom_page_height_used_for_flip():
    slide = Slide(id="s", elements=(text(y=10, h=20),))
    async with ImageLoader() as loader:
        page = await PageRenderer(loader, page_width=800, page_height=450).render_slide(slide)
    assert page.texts[0].y == 420


@pytest.mark.asyncio
async def test_image_background_drawn_full_page(png_uri):
    slide = Slide(id="s", background=ImageBackground(png_uri))
    async with ImageLoader() as loader:
        page = await PageRenderer(loader).render_slide(slide)
    [op] = page.operations
    assert isinstance(op, DrawImage)
    assert (op.x, op.y, op.width, op.height, op.is_background) == (0, 0, 1000, 600, True)


@pytest.mark.asyncio
@pytest.mark.parametrize("source", ["data:image/png;base64,AAAA", "missing-file.png"])
async def test_broken_background_falls_back_to_white(source):
    slide = Slide(id="s", background=ImageBackground(source))
    async with ImageLoader() as loader:
        page = await PageRenderer(loader).render_slide(slide)
    assert page.operations == [FillRect(0, 0, 1000, 600, WHITE)]


@pytest.mark.asyncio
async def test_unsupported_background_falls_back_to_white(gif_uri):
    slide = Slide(id="s", background=ImageBackground(gif_uri))
    async with ImageLoader() as loader:
        page = await PageRenderer(loader).render_slide(slide)
    assert page.operations == [FillRect(0, 0, 1000, 600, WHITE)]


@pytest.mark.asyncio
async def test_bad_image_element_is_skipped_not_the_slide(png_uri, gif_uri):
    elements = (
        ImageElement(id="good", position=Position(10, 20), size=Size(30, 40), content=png_uri),
        ImageElement(id="gif", position=Position(0, 0), size=Size(30, 40), content=gif_uri),
        ImageElement(id="broken", position=Position(0, 0), size=Size(30, 40), content="data:image/png;base64,AAAA"),
        text("t1"),
    )
    async with ImageLoader() as loader:
        page = await PageRenderer(loader).render_slide(Slide(id="s", elements=elements))

    [image] = page.images
    assert image.element_id == "good"
    assert (image.x, image.y, image.width, image.height) == (10, 600 - 20 - 40, 30, 40)
    assert [t.element_id for t in page.texts] == ["t1"]
    # background + image + text
    assert len(page.operations) == 3


@pytest.mark.asyncio
async def test_elements_keep_z_order(png_uri):
    elements = (
        text("bottom"),
        ImageElement(id="middle", position=Position(0, 0), size=Size(10, 10), content=png_uri),
        text("top"),
    )
    async with ImageLoader() as loader:
        page = await PageRenderer(loader).render_slide(Slide(id="s", elements=elements))
    assert [op.element_id for op in page.operations[1:]] == ["bottom", "middle", "top"]


@pytest.mark.asyncio
async def test_remote_failure_only_affects_that_image(png_bytes):
    def handler(request):
        if request.url.path == "/slow.png":
            raise httpx.ConnectTimeout("timeout", request=request)
        return httpx.Response(200, content=png_bytes, headers={"content-type": "image/png"})

    deck = Presentation(slides=(
        Slide(id="s1", elements=(
            ImageElement(id="slow", position=Position(0, 0), size=Size(10, 10), content="https://x.test/slow.png"),
            ImageElement(id="ok", position=Position(0, 0), size=Size(10, 10), content="https://x.test/ok.png"),
        )),
        Slide(id="s2", background=ImageBackground("https://x.test/slow.png")),
    ))
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        pages = await PageRenderer(ImageLoader(client=client)).render(deck)

    assert [img.element_id for img in pages[0].images] == ["ok"]
    assert pages[1].operations == [FillRect(0, 0, 1000, 600, WHITE)]


@pytest.mark.asyncio
async def test_end_to_end_single_text_slide():
    manager = HistoryManager()
    manager.dispatch(AddSlide(Slide(id="S1")))
    manager.dispatch(AddElement("S1", text("hi", x=10, y=10, w=50, h=20, content="Hi")))

    async with ImageLoader() as loader:
        pages = await PageRenderer(loader).render(manager.present.presentation)

    assert len(pages) == 1
    [draw] = pages[0].texts
    assert draw.text == "Hi"
    assert draw.y == pages[0].height - 10 - 20


@pytest.mark.asyncio
async def test_empty_presentation_has_no_pages():
    async with ImageLoader() as loader:
        assert await PageRenderer(loader).render(Presentation()) == []
