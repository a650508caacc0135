from PIL import Image

from printer.directives import Cut, Feed, SetAlign, SetStyle, Text
from printer.renderer import TicketRenderer, render_ticket_image
from printer.template import build_test_page, build_ticket


def test_render_ticket(order):
    image = render_ticket_image(build_ticket(order))
    assert isinstance(image, Image.Image)
    assert image.width == 576
    assert image.height > 200


def test_render_saves_png(tmp_path, order):
    target = tmp_path / "ticket.png"
    render_ticket_image(build_ticket(order), path=str(target))
    with Image.open(target) as saved:
        assert saved.format == "PNG"


def test_feed_and_cut_advance_paper():
    renderer = TicketRenderer(384)
    renderer.render([Text("hola")])
    after_text = renderer.y
    renderer.render([Feed(2)])
    assert renderer.y > after_text
    after_feed = renderer.y
    renderer.render([Cut()])
    assert renderer.y == after_feed + 2 * TicketRenderer.CUT_MARGIN


def test_state_follows_directives():
    renderer = TicketRenderer(384)
    renderer.render([SetAlign("right"), SetStyle("bold")])
    assert renderer.state.align == "right"
    assert renderer.state.bold is True


def test_long_tickets_grow_canvas():
    image = render_ticket_image([Feed(400), Text("fin")] + list(build_test_page()))
    assert image.height > 4000
