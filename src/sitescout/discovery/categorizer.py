"""Classification of URLs into standard page types.

Patterns are literal paths in several languages (English, Italian, Spanish,
French, German, Portuguese, Russian, Chinese, Japanese, Arabic, Dutch; the
non-Latin ones transliterated). A URL path matches a pattern when:

- it equals the pattern, or
- a single-segment pattern equals any one of its segments
  ("/contact" matches "/en/contact" and "/contact/form", not "/contacto"), or
- a multi-segment pattern's segments appear consecutively in it.

Language-code home patterns ("/it", "/en-us") only ever match the whole path,
so "/it" is a home page but "/it/contatti" is not.
"""

import logging
import re
from collections.abc import Iterable
from urllib.parse import unquote, urlsplit

from sitescout.models import PageCategory

LOGGER = logging.getLogger(__name__)

CATEGORY_PATTERNS: dict[PageCategory, tuple[str, ...]] = {
    PageCategory.HOME: (
        "/", "/home", "/index", "/homepage", "/home-page", "/main",
        # Language codes
        "/it", "/en", "/es", "/fr", "/de", "/pt", "/ru", "/zh", "/ja", "/ar", "/nl",
        "/en-us", "/en-gb", "/en-ca", "/en-au",
        "/es-es", "/es-mx", "/es-ar", "/es-co",
        "/fr-fr", "/fr-ca", "/fr-be",
        "/pt-br", "/pt-pt",
        "/zh-cn", "/zh-tw", "/zh-hk",
        "/de-de", "/de-at", "/de-ch",
        "/inicio", "/portada",
        "/accueil", "/accueil-fr",
        "/startseite", "/hauptseite",
        "/pagina-inicial", "/inicio-pt",
        "/glavnaya", "/domoj",
        "/shouye", "/zhuye",
        "/homu", "/toppu",
        "/home-ar", "/raisa",
        "/startpagina", "/homepage-nl",
    ),
    PageCategory.CONTACT: (
        "/contact", "/contact-us", "/contacts", "/contactus", "/get-in-touch",
        "/contatti", "/contattaci", "/contatto",
        "/contacto", "/contactanos", "/contactenos",
        "/contactez-nous", "/nous-contacter", "/contact-fr",
        "/kontakt", "/kontaktieren", "/kontaktiere-uns",
        "/contato", "/contatos", "/fale-conosco",
        "/kontakt-ru", "/svyaz", "/kontakty",
        "/lianxi", "/联系",
        "/otoiawase", "/renraku",
        "/ittisal", "/contact-ar",
        "/contacteer", "/contact-nl", "/contactpagina",
    ),
    PageCategory.ABOUT: (
        "/about", "/about-us", "/aboutus", "/company", "/who-we-are", "/our-story", "/team",
        "/chi-siamo", "/azienda", "/storia", "/la-nostra-storia",
        "/nosotros", "/quienes-somos", "/sobre-nosotros", "/acerca-de",
        "/a-propos", "/qui-sommes-nous", "/notre-histoire",
        "/uber-uns", "/ueber-uns", "/unternehmen", "/firma",
        "/sobre-nos", "/quem-somos", "/empresa", "/nossa-historia",
        "/o-nas", "/o-kompanii", "/nasha-istoriya",
        "/guanyu", "/guanyuwomen", "/关于",
        "/kaishagaiyou", "/wareware",
        "/anna", "/hawlana", "/about-ar",
        "/over-ons", "/bedrijf", "/ons-verhaal",
    ),
    PageCategory.PRODUCTS: (
        "/products", "/services", "/catalog", "/shop", "/store", "/solutions", "/offerings",
        "/prodotti", "/servizi", "/catalogo", "/negozio",
        "/productos", "/servicios", "/tienda", "/catalogo-es",
        "/produits", "/services-fr", "/boutique", "/catalogue",
        "/produkte", "/dienstleistungen", "/katalog",
        "/produtos", "/servicos", "/loja", "/catalogo-pt",
        "/produkty", "/uslugi", "/magazin", "/katalog-ru",
        "/chanpin", "/fuwu", "/shangdian",
        "/seihin", "/sabisu", "/mise",
        "/muntajat", "/khidmat", "/products-ar",
        "/producten", "/diensten", "/winkel", "/catalogus",
    ),
    PageCategory.BLOG: (
        "/blog",
        "/news", "/articles", "/insights", "/updates", "/press",
        "/notizie", "/articoli", "/novita",
        "/noticias", "/articulos",
        "/actualites", "/nouvelles", "/articles-fr",
        "/nachrichten", "/neuigkeiten", "/artikel",
        "/noticias-pt", "/artigos", "/novidades", "/imprensa",
        "/novosti", "/stati", "/blog-ru",
        "/xinwen", "/wenzhang", "/boke",
        "/nyusu", "/kiji", "/buroggu",
        "/akhbar", "/maqalat", "/blog-ar",
        "/nieuws", "/artikelen", "/blog-nl",
    ),
    PageCategory.FAQ: (
        "/faq", "/support",
        "/help", "/questions", "/customer-service", "/helpdesk",
        "/domande", "/aiuto", "/supporto", "/assistenza", "/domande-frequenti",
        "/preguntas", "/ayuda", "/soporte", "/preguntas-frecuentes",
        "/aide", "/questions-frequentes",
        "/hilfe", "/haeufige-fragen",
        "/ajuda", "/perguntas", "/perguntas-frequentes", "/suporte-pt",
        "/pomoshch", "/voprosy", "/podderzhka",
        "/bangzhu", "/wenti", "/zhichi",
        "/tasukeru", "/shitsumon", "/sapoto",
        "/musaada", "/asila", "/support-ar",
        "/hulp", "/vragen", "/veelgestelde-vragen",
    ),
    PageCategory.PRIVACY: (
        "/privacy", "/privacy-policy",
        "/terms", "/legal", "/cookies", "/terms-of-service", "/terms-and-conditions",
        "/termini", "/cookie", "/informativa-privacy", "/termini-condizioni",
        "/privacidad", "/terminos", "/politica-privacidad", "/condiciones",
        "/confidentialite", "/mentions-legales", "/politique-confidentialite", "/cgv",
        "/datenschutz", "/impressum", "/agb", "/rechtliches", "/nutzungsbedingungen",
        "/privacidade", "/termos", "/politica-privacidade", "/condicoes",
        "/konfidentsialnost", "/usloviya", "/politika-konfidentsialnosti",
        "/yinsi", "/tiaokuan", "/falv",
        "/puraibashi", "/kiyaku", "/riyoukiyaku",
        "/khususiya", "/shurut", "/privacy-ar",
        "/privacy-nl", "/voorwaarden", "/juridisch",
    ),
    PageCategory.LOGIN: (
        "/login",
        "/signin", "/sign-in", "/register", "/signup", "/sign-up", "/my-account", "/user", "/auth",
        "/accedi", "/account", "/registrati", "/area-riservata", "/entra",
        "/acceso", "/ingresar", "/registro", "/iniciar-sesion", "/entrar",
        "/connexion", "/se-connecter", "/inscription", "/mon-compte",
        "/anmelden", "/registrieren", "/einloggen", "/konto",
        "/login-pt", "/registro-pt", "/minha-conta",
        "/vkhod", "/registratsiya", "/moj-akkaunt",
        "/denglu", "/zhuce", "/wode-zhanghu",
        "/roguin", "/touroku", "/akaunts",
        "/dukhuul", "/tasjil", "/login-ar",
        "/inloggen", "/registreren", "/mijn-account",
    ),
    PageCategory.CART: (
        "/cart", "/basket", "/checkout", "/order", "/shopping-cart", "/bag",
        "/carrello", "/ordine", "/cassa", "/acquista",
        "/carrito", "/cesta", "/pedido", "/comprar",
        "/panier", "/commande", "/acheter",
        "/warenkorb", "/kasse", "/bestellen", "/einkaufswagen",
        "/carrinho", "/cesta-pt", "/pedido-pt", "/comprar-pt", "/finalizar",
        "/korzina", "/zakaz", "/oformit",
        "/gouwuche", "/dingdan", "/jiesuan",
        "/kaato", "/chuumon", "/kaikei",
        "/sabt", "/talabiya", "/cart-ar",
        "/winkelwagen", "/bestelling", "/afrekenen",
    ),
}

# Order used for summaries
SUMMARY_ORDER = (
    PageCategory.HOME,
    PageCategory.ABOUT,
    PageCategory.CONTACT,
    PageCategory.PRODUCTS,
    PageCategory.BLOG,
    PageCategory.FAQ,
    PageCategory.PRIVACY,
    PageCategory.LOGIN,
    PageCategory.CART,
)

FILE_EXTENSIONS = (
    ".html", ".htm", ".php", ".asp", ".aspx", ".jsp",
    ".do", ".action", ".cfm", ".pl", ".cgi", ".shtml",
)  # fmt: skip

# /xx or /xx-yy
LANGUAGE_PREFIX_RE = re.compile(r"^/[a-z]{2}(?:-[a-z]{2})?$")


def categorize_urls(urls: Iterable[str]) -> dict[PageCategory, list[str]]:
    """
    Group URLs by the standard page types their paths match.

    Matching is case-insensitive, ignores one trailing slash and common
    server-side file extensions, and works on the percent-decoded path.
    A URL can land in several categories.

    Args:
        urls: URLs to classify.

    Returns:
        Mapping of category to matching URLs in input order. Categories
        with no match are absent.

    Example:
        >>> categorize_urls(["https://example.com/", "https://example.com/it/contatti"])
        {<PageCategory.HOME: 'home'>: ['https://example.com/'],
         <PageCategory.CONTACT: 'contact'>: ['https://example.com/it/contatti']}
    """
    categories: dict[PageCategory, list[str]] = {}

    for url in urls:
        path = normalise_path(url)
        if path is None:
            continue

        for category, patterns in CATEGORY_PATTERNS.items():
            if any(matches_pattern(path, pattern, category) for pattern in patterns):
                categories.setdefault(category, []).append(url)

    return categories


def normalise_path(url: str) -> str | None:
    """Return the lowercased, decoded path of a URL with trailing slash and extension removed."""
    try:
        raw_path = urlsplit(url).path
    except ValueError:
        LOGGER.debug("Skipping unparsable URL: %s", url)
        return None

    path = unquote(raw_path).lower()
    if path != "/" and path.endswith("/"):
        path = path[:-1]
    return strip_file_extension(path)


def strip_file_extension(path: str) -> str:
    """Remove one known file extension, so ``/contact.html`` becomes ``/contact``."""
    for extension in FILE_EXTENSIONS:
        if path.endswith(extension):
            return path[: -len(extension)]
    return path


def is_language_prefix(pattern: str) -> bool:
    """Check if a pattern looks like a language code such as ``/it`` or ``/pt-br``."""
    return LANGUAGE_PREFIX_RE.match(pattern) is not None


def matches_pattern(path: str, pattern: str, category: PageCategory) -> bool:
    """
    Check a normalised path against one category pattern.

    Args:
        path: Normalised URL path.
        pattern: Category pattern.
        category: Category the pattern belongs to.

    Returns:
        True if the path matches.
    """
    pattern = pattern.lower()
    if pattern != "/" and pattern.endswith("/"):
        pattern = pattern[:-1]

    if pattern == "/":
        return path in ("/", "")

    if path == pattern:
        return True

    if category is PageCategory.HOME and is_language_prefix(pattern):
        return False

    path_segments = _segments(path)
    pattern_segments = _segments(pattern)
    if not pattern_segments:
        return False

    if len(pattern_segments) == 1:
        return pattern_segments[0] in path_segments

    width = len(pattern_segments)
    return any(path_segments[i : i + width] == pattern_segments for i in range(len(path_segments) - width + 1))


def _segments(path: str) -> list[str]:
    """Split a path into non-empty segments (tolerates ``//``)."""
    return [segment for segment in path.strip("/").split("/") if segment]


def standard_pages_summary(categories: dict[PageCategory, list[str]]) -> str:
    """
    Summarise categorised pages in one line.

    Example:
        "Found standard pages: home (1 URL), contact (2 URLs)"
    """
    parts = []
    for category in SUMMARY_ORDER:
        count = len(categories.get(category, []))
        if count:
            parts.append(f"{category.value} ({count} URL{'' if count == 1 else 's'})")

    if not parts:
        return "No standard pages found"
    return "Found standard pages: " + ", ".join(parts)
