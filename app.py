import atexit
import math
from datetime import datetime, timezone

from flask import Flask, g, jsonify, request

from config import (
    DETAILS_ENDPOINT,
    LATEST_ENDPOINT,
    STATS_ENDPOINT,
    load_settings,
)
from errors import FetchError, InvalidParameterError, MissingParameterError
from log_config import setup_logger
from ratelimit.rate_limiter import (
    RateLimitConfig,
    RateLimiter,
    get_client_identifier,
)
from scraper.detail_scraper import EarthquakeDetailScraper
from scraper.earthquake_utils import (
    DEFAULT_PAGE_SIZE,
    SORT_FIELDS,
    SORT_ORDERS,
    filter_earthquakes,
    paginate,
    sort_earthquakes,
    summarize_earthquakes,
)
from scraper.latest_scraper import LatestEarthquakeScraper

PAGINATION_PARAMS = ("page", "page_size")


def add_rate_limit_headers(response, result):
    response.headers["X-RateLimit-Limit"] = str(result.limit)
    response.headers["X-RateLimit-Remaining"] = str(result.remaining)
    response.headers["X-RateLimit-Reset"] = str(result.reset)
    return response


def rate_limit_exceeded_response(result, now_ms: int):
    """Build the 429 response for a rejected rate limit check."""
    retry_after = math.ceil((result.reset - now_ms) / 1000)
    reset_at = datetime.fromtimestamp(result.reset / 1000, tz=timezone.utc)

    response = jsonify(
        {
            "error": "Too many requests",
            "message": f"Rate limit exceeded. Please try again in {retry_after} seconds.",
            "limit": result.limit,
            "remaining": result.remaining,
            "resetAt": reset_at.isoformat(timespec="milliseconds").replace(
                "+00:00", "Z"
            ),
        }
    )
    response.status_code = 429
    response.headers["Retry-After"] = str(retry_after)
    return add_rate_limit_headers(response, result)


def create_app(
    settings=None,
    rate_limiter=None,
    latest_scraper=None,
    detail_scraper=None,
):
    """
    Build the Flask application serving PHIVOLCS earthquake data.

    Collaborators can be injected (tests pass fakes); otherwise they are
    built from settings. A limiter created here starts its sweep thread
    and is stopped at interpreter exit.

    Args:
        settings (Settings): Service settings, defaults to load_settings()
        rate_limiter (RateLimiter): Shared limiter for all endpoints
        latest_scraper (LatestEarthquakeScraper): List extractor
        detail_scraper (EarthquakeDetailScraper): Detail extractor

    Returns:
        Flask: Configured application
    """
    settings = settings or load_settings()
    app = Flask(__name__)
    logger = setup_logger("phivolcs_api")

    if rate_limiter is None:
        rate_limiter = RateLimiter(sweep_interval=settings.rate_limit_sweep_seconds)
        rate_limiter.start()
        atexit.register(rate_limiter.stop)

    latest_scraper = latest_scraper or LatestEarthquakeScraper.from_settings(settings)
    detail_scraper = detail_scraper or EarthquakeDetailScraper.from_settings(settings)

    window_ms = settings.rate_limit_window_seconds * 1000
    latest_limit = RateLimitConfig(
        window_ms=window_ms, max_requests=settings.latest_rate_limit
    )
    details_limit = RateLimitConfig(
        window_ms=window_ms, max_requests=settings.details_rate_limit
    )

    app.extensions["rate_limiter"] = rate_limiter

    def check_limit(endpoint, config):
        """Record the check on g; returns a 429 response if rejected."""
        client_id = get_client_identifier(request.headers)
        result = rate_limiter.check_rate_limit(client_id, endpoint, config)
        if not result.success:
            logger.warning(f"Rate limited {client_id} on {endpoint}")
            return rate_limit_exceeded_response(result, rate_limiter.clock())
        g.rate_limit = result
        return None

    @app.after_request
    def attach_rate_limit_headers(response):
        result = g.get("rate_limit")
        if result is not None:
            add_rate_limit_headers(response, result)
        return response

    @app.errorhandler(MissingParameterError)
    @app.errorhandler(InvalidParameterError)
    def handle_parameter_error(e):
        logger.warning(f"Bad request to {request.path}: {e}")
        return jsonify({"error": str(e)}), 400

    @app.route("/health")
    def health_check():
        """Health check endpoint for container monitoring"""
        return jsonify(
            {
                "status": "healthy",
                "timestamp": datetime.now().isoformat(),
                "rate_limit_keys": len(rate_limiter.store),
            }
        )

    @app.route(LATEST_ENDPOINT)
    def get_latest():
        """Latest earthquakes, optionally filtered, sorted and paginated"""
        rejected = check_limit(LATEST_ENDPOINT, latest_limit)
        if rejected is not None:
            return rejected

        # Optional query parameters; unparseable numbers are ignored
        search = request.args.get("search")
        min_magnitude = request.args.get("min_magnitude", type=float)
        sort_by = request.args.get("sort_by")
        sort_order = request.args.get("sort_order", "desc")
        paginated = any(name in request.args for name in PAGINATION_PARAMS)
        page = request.args.get("page", 1, type=int)
        page_size = request.args.get("page_size", DEFAULT_PAGE_SIZE, type=int)

        if sort_by is not None and sort_by not in SORT_FIELDS:
            raise InvalidParameterError("sort_by", sort_by)
        if sort_order not in SORT_ORDERS:
            raise InvalidParameterError("sort_order", sort_order)

        try:
            latest = latest_scraper.fetch_latest()
        except FetchError as e:
            logger.exception(f"PHIVOLCS scraping failed: {e}")
            return jsonify({"error": "Failed to fetch PHIVOLCS data"}), 500

        earthquakes = filter_earthquakes(
            latest.data, search=search, min_magnitude=min_magnitude or 0.0
        )

        if sort_by:
            earthquakes = sort_earthquakes(earthquakes, sort_by, sort_order)

        body = {}
        if paginated:
            total = len(earthquakes)
            try:
                earthquakes, total_pages = paginate(earthquakes, page, page_size)
            except ValueError:
                raise InvalidParameterError("page", f"{page}/{page_size}")
            body.update(
                {
                    "total": total,
                    "page": page,
                    "page_size": page_size,
                    "total_pages": total_pages,
                }
            )

        body["count"] = len(earthquakes)
        body["data"] = [eq.to_dict() for eq in earthquakes]
        return jsonify(body)

    @app.route(DETAILS_ENDPOINT)
    def get_details():
        """Details of one earthquake information page (?url=...)"""
        rejected = check_limit(DETAILS_ENDPOINT, details_limit)
        if rejected is not None:
            return rejected

        page_url = request.args.get("url")
        if not page_url:
            raise MissingParameterError("url")

        try:
            details = detail_scraper.fetch_details(page_url)
        except FetchError as e:
            logger.exception(f"PHIVOLCS scraping failed: {e}")
            return jsonify({"error": "Failed to fetch details"}), 500

        return jsonify(details.to_dict())

    @app.route(STATS_ENDPOINT)
    def get_stats():
        """Headline statistics over the latest earthquakes"""
        rejected = check_limit(STATS_ENDPOINT, latest_limit)
        if rejected is not None:
            return rejected

        try:
            latest = latest_scraper.fetch_latest()
        except FetchError as e:
            logger.exception(f"PHIVOLCS scraping failed: {e}")
            return jsonify({"error": "Failed to fetch PHIVOLCS data"}), 500

        return jsonify(summarize_earthquakes(latest.data))

    return app


if __name__ == "__main__":
    settings = load_settings()
    app = create_app(settings)
    app.run(host=settings.host, port=settings.port, debug=False)
