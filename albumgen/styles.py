# Colours and typography shared by every page of an album build
import os
from dataclasses import dataclass, replace

from reportlab.lib.colors import HexColor, white
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont


@dataclass(frozen=True)
class StylePalette:
    """Read-only colour and typography settings threaded into every page composer."""
    primary: object = HexColor('#FBF6EF')     # page background
    secondary: object = HexColor('#EFE3D3')   # shadows, ornament cores
    accent: object = HexColor('#B8925A')      # ornaments, ordinals
    text: object = HexColor('#3F352C')
    muted: object = HexColor('#8A7B6C')
    border: object = HexColor('#CDB493')
    frame: object = white

    font_family: str = 'Times-Roman'
    heading_font: str = 'Times-Bold'
    italic_font: str = 'Times-Italic'

    title_size: float = 40
    subtitle_size: float = 18
    body_size: float = 13
    caption_size: float = 11
    small_size: float = 7


DEFAULT_PALETTE = StylePalette()

# (registered name, candidate paths) tried in order; first hit wins
SERIF_FONT_CANDIDATES = {
    'regular': ('AlbumSerif', [
        '/Library/Fonts/Georgia.ttf',                                   # macOS
        '/System/Library/Fonts/Supplemental/Georgia.ttf',               # newer macOS
        r'C:\Windows\Fonts\georgia.ttf',                                # Windows
        '/usr/share/fonts/truetype/dejavu/DejaVuSerif.ttf',             # Debian/Ubuntu
        '/usr/share/fonts/dejavu-serif-fonts/DejaVuSerif.ttf',          # Fedora
    ]),
    'bold': ('AlbumSerif-Bold', [
        '/Library/Fonts/Georgia Bold.ttf',
        '/System/Library/Fonts/Supplemental/Georgia Bold.ttf',
        r'C:\Windows\Fonts\georgiab.ttf',
        '/usr/share/fonts/truetype/dejavu/DejaVuSerif-Bold.ttf',
        '/usr/share/fonts/dejavu-serif-fonts/DejaVuSerif-Bold.ttf',
    ]),
    'italic': ('AlbumSerif-Italic', [
        '/Library/Fonts/Georgia Italic.ttf',
        '/System/Library/Fonts/Supplemental/Georgia Italic.ttf',
        r'C:\Windows\Fonts\georgiai.ttf',
        '/usr/share/fonts/truetype/dejavu/DejaVuSerif-Italic.ttf',
        '/usr/share/fonts/dejavu-serif-fonts/DejaVuSerif-Italic.ttf',
    ]),
}


def _register_first(font_name, paths):
    if font_name in pdfmetrics.getRegisteredFontNames():
        return True
    for p in paths:
        try:
            if os.path.exists(p):
                pdfmetrics.registerFont(TTFont(font_name, p))
                return True
        except Exception as e:
            print(f"⚠️  Could not register font {p}: {e}")
            continue
    return False


def register_fonts(candidates=None):
    """
    Try to register a serif family from common system locations.
    Falls back to the built-in Times fonts for any face that is not found.

    Returns (body_font, heading_font, italic_font).
    """
    candidates = candidates or SERIF_FONT_CANDIDATES
    body_font = DEFAULT_PALETTE.font_family
    heading_font = DEFAULT_PALETTE.heading_font
    italic_font = DEFAULT_PALETTE.italic_font

    name, paths = candidates['regular']
    if _register_first(name, paths):
        body_font = name
        # bold/italic fall back to the regular face of the same family
        bold_name, bold_paths = candidates['bold']
        heading_font = bold_name if _register_first(bold_name, bold_paths) else name
        italic_name, italic_paths = candidates['italic']
        italic_font = italic_name if _register_first(italic_name, italic_paths) else name
        print(f"✓ Registered album font family: {body_font}")
    else:
        print("⚠️  No serif TTF found. Using built-in Times fonts.")

    return body_font, heading_font, italic_font


def palette_with_fonts(palette=DEFAULT_PALETTE, candidates=None):
    """A copy of `palette` using whichever fonts register_fonts() found."""
    body_font, heading_font, italic_font = register_fonts(candidates)
    return replace(
        palette,
        font_family=body_font,
        heading_font=heading_font,
        italic_font=italic_font,
    )
