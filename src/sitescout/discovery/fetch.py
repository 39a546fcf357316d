"""Size-capped HTTP body reads shared by the discovery components."""

import logging
import zlib
from dataclasses import dataclass

import httpx

LOGGER = logging.getLogger(__name__)

# 50MB, large enough for big sitemaps
MAX_BODY_SIZE = 50 * 1024 * 1024

# Transport and URL errors that degrade a single fetch instead of failing the extraction
FETCH_ERRORS: tuple[type[Exception], ...] = (httpx.HTTPError, httpx.InvalidURL)

# Content-Encoding tokens decoded after the capped read, with their zlib wbits
DECODABLE_ENCODINGS = {
    "gzip": 16 + zlib.MAX_WBITS,
    "x-gzip": 16 + zlib.MAX_WBITS,
    "deflate": zlib.MAX_WBITS,
}

# Sent on every request so servers only use encodings we can decode under the cap
ACCEPT_ENCODING = "gzip, deflate"


@dataclass
class FetchedBody:
    """
    A fetched response body.

    Attributes:
        url: Final URL after redirects.
        status_code: HTTP status code.
        content_type: Content-Type header value (may be empty).
        content: Body bytes, empty unless the status was 200.
        truncated: True if the body was cut at the size cap.
        redirected: True if at least one redirect was followed.
    """

    url: str
    status_code: int
    content_type: str = ""
    content: bytes = b""
    truncated: bool = False
    redirected: bool = False

    @property
    def ok(self) -> bool:
        return self.status_code == 200

    @property
    def is_html(self) -> bool:
        return "text/html" in self.content_type.lower()


async def fetch_capped(
    client: httpx.AsyncClient,
    url: str,
    max_bytes: int = MAX_BODY_SIZE,
    *,
    read_body: bool = True,
    require_html: bool = False,
) -> FetchedBody:
    """
    GET a URL and read at most ``max_bytes`` of its body.

    The body is only read for 200 responses. The cap applies to the bytes as
    they arrive on the wire, before any Content-Encoding is undone, so a
    hostile server cannot make us buffer more than ``max_bytes``. Decoding
    is bounded to ``max_bytes`` of output as well. Gzip inflation of a
    ``.gz`` resource itself is the caller's job.

    Args:
        client: HTTP client (redirect policy and headers are the client's).
        url: URL to fetch.
        max_bytes: Maximum number of body bytes to keep.
        read_body: If False, only status, headers and final URL are collected.
        require_html: If True, the body of a non-HTML response is not read.

    Returns:
        FetchedBody describing the response.

    Raises:
        httpx.HTTPError: On transport failures, or a body that cannot be decoded.
        httpx.InvalidURL: If the URL cannot be requested.
    """
    async with client.stream("GET", url) as response:
        fetched = FetchedBody(
            url=str(response.url),
            status_code=response.status_code,
            content_type=response.headers.get("content-type", ""),
            redirected=bool(response.history),
        )
        if not read_body or response.status_code != 200:
            return fetched
        if require_html and not fetched.is_html:
            LOGGER.debug("Skipping body of %s (%s)", url, fetched.content_type or "no content type")
            return fetched

        chunks: list[bytes] = []
        size = 0
        async for chunk in response.aiter_raw():
            if size + len(chunk) > max_bytes:
                chunks.append(chunk[: max_bytes - size])
                fetched.truncated = True
                break
            chunks.append(chunk)
            size += len(chunk)

        if fetched.truncated:
            LOGGER.warning("Response body from %s exceeded %d bytes, truncated", url, max_bytes)

        content = b"".join(chunks)
        encoding = response.headers.get("content-encoding", "")
        fetched.content = decode_content(content, encoding, max_bytes, request=response.request)
        return fetched


def decode_content(
    data: bytes,
    content_encoding: str,
    max_bytes: int,
    *,
    request: httpx.Request | None = None,
) -> bytes:
    """
    Undo a Content-Encoding, keeping at most ``max_bytes`` of output.

    Truncated input inflates to a prefix of the original body.

    Raises:
        httpx.DecodingError: If the encoding is unsupported or the data is corrupt.
    """
    # Encodings are listed in the order they were applied
    codings = [coding.strip().lower() for coding in content_encoding.split(",") if coding.strip()]
    for coding in reversed(codings):
        if coding == "identity":
            continue
        if coding not in DECODABLE_ENCODINGS:
            raise httpx.DecodingError(f"Unsupported content encoding: {coding}", request=request)
        try:
            data = inflate(data, max_bytes, DECODABLE_ENCODINGS[coding])
        except zlib.error as e:
            if coding != "deflate":
                raise httpx.DecodingError(f"Invalid {coding} body: {e}", request=request) from e
            # Some servers send raw deflate without the zlib header
            try:
                data = inflate(data, max_bytes, -zlib.MAX_WBITS)
            except zlib.error as raw_error:
                raise httpx.DecodingError(f"Invalid deflate body: {raw_error}", request=request) from raw_error
    return data


def inflate(data: bytes, max_bytes: int, wbits: int) -> bytes:
    """Inflate zlib/gzip/deflate data, keeping at most ``max_bytes`` of output."""
    decompressor = zlib.decompressobj(wbits)
    inflated = decompressor.decompress(data, max_bytes)
    if decompressor.unconsumed_tail:
        LOGGER.warning("Decompressed body exceeded %d bytes, truncated", max_bytes)
    return inflated
