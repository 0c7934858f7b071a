import httpx

from tagesschau.errors import UrlConstructionError
from tagesschau.models import CalendarDate, RequestConfig, Ressort

BASE_URL = "https://www.tagesschau.de/api2u/news"


def prepare_url(
    date: CalendarDate, config: RequestConfig, base_url: str = BASE_URL
) -> str:
    """Build the request URL for one date from the base endpoint and config.

    The date goes out as YYMMDD, so dates outside 1969-2068 raise ``InvalidDate``.
    """
    try:
        url = httpx.URL(base_url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise UrlConstructionError(f"Unable to parse base URL {base_url!r}") from exc
    if not url.scheme or not url.host:
        raise UrlConstructionError(f"Base URL {base_url!r} has no scheme or host")

    params = {"date": date.format()}
    if config.regions:
        params["regions"] = config.region_codes()
    if config.ressort is not Ressort.NONE:
        params["ressort"] = str(config.ressort)

    return str(url.copy_merge_params(params))
