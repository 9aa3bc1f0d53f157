"""DigitalOcean provider: create, poll and delete droplets via the REST API."""

import asyncio
import json
import logging
import os

import httpx

from dropship.errors import ConfigError, ProviderError
from dropship.provisioning.types import PollResult, PollStatus, VMInstance

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.digitalocean.com"
TOKEN_ENV_VAR = "DIGITALOCEAN_TOKEN"

# Listing page sizes
KEYS_PER_PAGE = 50
DROPLETS_PER_PAGE = 20


def resolve_token(token=None):
    """Return the API token from the argument or DIGITALOCEAN_TOKEN.

    Raises:
        ConfigError: neither is set.
    """
    token = token or os.environ.get(TOKEN_ENV_VAR)
    if not token:
        raise ConfigError(f"DigitalOcean API token required. Set {TOKEN_ENV_VAR}.")
    return token


def is_transient(exc: Exception) -> bool:
    """True for failures worth retrying: network errors, rate limits, 5xx."""
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        code = exc.response.status_code
        return code == 429 or code >= 500
    return False


def _provider_error(exc: Exception, action: str) -> ProviderError:
    if isinstance(exc, httpx.HTTPStatusError):
        return ProviderError(
            f"DigitalOcean rejected {action} (HTTP {exc.response.status_code})",
            context=exc.response.text.strip() or None,
            status_code=exc.response.status_code,
        )
    return ProviderError(f"DigitalOcean request failed during {action}", context=str(exc))


class DigitalOceanClient:
    """Thin async wrapper over the droplet endpoints this tool needs.

    Args:
        token: API token (see resolve_token).
        api_url: base URL, overridable for testing.
        dry_run: log requests instead of sending them.
        transport: optional httpx transport (tests pass httpx.MockTransport).
    """

    def __init__(self, token, api_url=DEFAULT_API_URL, dry_run=False, transport=None, timeout=60):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.dry_run = dry_run
        self.timeout = timeout
        self._transport = transport

    async def _api_request(self, method, path, params=None, data=None):
        """Make an authenticated API request.

        Returns:
            Parsed JSON body (``{}`` for empty responses), or ``None`` in dry-run mode.

        Raises:
            httpx.HTTPStatusError / httpx.TransportError: left to callers to classify.
            ProviderError: a success status with a body that isn't JSON.
        """
        url = f"{self.api_url}{path}"
        if self.dry_run:
            logger.info(f"[dry-run] {method} {url} params={params or {}}")
            if data is not None:
                logger.info(f"[dry-run] payload: {json.dumps(data, indent=2)}")
            return None

        headers = {"Authorization": f"Bearer {self.token}", "Content-Type": "application/json"}
        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            resp = await client.request(method, url, params=params, json=data, headers=headers)
        resp.raise_for_status()
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as e:
            # Proxies and captive portals answer 200 with an HTML page
            raise ProviderError(
                f"Non-JSON response from {method} {path} (HTTP {resp.status_code})",
                context=resp.text.strip()[:200] or None,
                status_code=resp.status_code,
            ) from e

    # ── Account ─────────────────────────────────────────────────────

    async def verify_account(self) -> dict:
        """Check that the token belongs to a real account.

        GET /v2/account
        """
        try:
            result = await self._api_request("GET", "/v2/account")
        except httpx.HTTPError as e:
            raise _provider_error(e, "account lookup") from e
        if result is None:
            return {}
        account = result.get("account", {})
        logger.info(f"Authenticated as {account.get('email', 'unknown')} (status: {account.get('status', 'unknown')})")
        return account

    async def list_ssh_keys(self) -> list[dict]:
        """List the SSH keys on the account and log their ids.

        GET /v2/account/keys
        """
        params = {"page": 1, "per_page": KEYS_PER_PAGE}
        try:
            result = await self._api_request("GET", "/v2/account/keys", params=params)
        except httpx.HTTPError as e:
            raise _provider_error(e, "SSH key listing") from e
        keys = (result or {}).get("ssh_keys", [])
        logger.info(f"SSH keys on your account: {len(keys)}")
        for key in keys:
            logger.info(f"ID: {key.get('id')}, Fingerprint: {key.get('fingerprint')}")
        return keys

    # ── Droplets ────────────────────────────────────────────────────

    @staticmethod
    def create_request(spec) -> dict:
        """Reduce a DropletSpec to the create-droplet payload."""
        return {
            "name": spec.name,
            "region": spec.region,
            "size": spec.size,
            "image": spec.image,
            "ssh_keys": [spec.ssh_key_id],
            "ipv6": False,
            "tags": [spec.tag],
        }

    async def create_droplet(self, spec) -> int:
        """Issue one create request and return the droplet id without waiting.

        POST /v2/droplets
        """
        payload = self.create_request(spec)
        logger.info(f"Droplet being created with parameters: {payload}")
        try:
            result = await self._api_request("POST", "/v2/droplets", data=payload)
        except httpx.HTTPError as e:
            raise _provider_error(e, "droplet creation") from e
        if result is None:
            return 0
        droplet_id = result.get("droplet", {}).get("id")
        if droplet_id is None:
            raise ProviderError("No droplet id returned from create API.", context=json.dumps(result))
        logger.info(f"Droplet created with ID: {droplet_id}")
        return droplet_id

    async def list_droplets_by_tag(self, tag) -> list[VMInstance]:
        """GET /v2/droplets?tag_name=<tag>. Errors propagate unclassified."""
        params = {"tag_name": tag, "page": 1, "per_page": DROPLETS_PER_PAGE}
        result = await self._api_request("GET", "/v2/droplets", params=params)
        if result is None:
            return [VMInstance(id=0, name="dry-run", tags=(tag,), public_ipv4=("dry-run-host",), status="active")]
        return [VMInstance.from_api(d) for d in result.get("droplets", [])]

    async def poll_once(self, tag) -> PollResult:
        """One listing attempt, classified as ready / not ready / transient / fatal."""
        try:
            instances = await self.list_droplets_by_tag(tag)
        except httpx.HTTPError as e:
            status = PollStatus.TRANSIENT_ERROR if is_transient(e) else PollStatus.FATAL_ERROR
            return PollResult(status=status, error=e)
        except ProviderError as e:
            # Undecodable body on a 2xx
            return PollResult(status=PollStatus.TRANSIENT_ERROR, error=e)

        for instance in instances:
            if instance.public_ip:
                return PollResult(status=PollStatus.READY, instance=instance)
        return PollResult(status=PollStatus.NOT_READY)

    async def poll_for_address(self, tag, interval=5.0) -> VMInstance:
        """Poll droplets carrying *tag* until one has a public IPv4 address.

        Sleeps *interval* before every attempt. There is no internal timeout:
        race this against a deadline and cancel it.

        Raises:
            ProviderError: the API rejected the listing request.
        """
        attempt = 0
        while True:
            await asyncio.sleep(interval)
            attempt += 1
            result = await self.poll_once(tag)
            if result.status is PollStatus.READY:
                logger.info(f"Droplet {result.instance.id} has public IP {result.instance.public_ip}")
                return result.instance
            if result.status is PollStatus.FATAL_ERROR:
                raise _provider_error(result.error, f"listing droplets tagged '{tag}'") from result.error
            if result.status is PollStatus.TRANSIENT_ERROR:
                logger.warning(f"Transient error polling droplets (attempt {attempt}): {result.error}")
            else:
                logger.debug(f"No address yet for tag '{tag}' (attempt {attempt})")

    async def delete_droplets_by_tag(self, tag) -> None:
        """Destroy every droplet carrying *tag*.

        DELETE /v2/droplets?tag_name=<tag>
        """
        logger.info(f"Deleting droplets tagged '{tag}'...")
        try:
            await self._api_request("DELETE", "/v2/droplets", params={"tag_name": tag})
        except httpx.HTTPError as e:
            raise _provider_error(e, "droplet deletion") from e
        if not self.dry_run:
            logger.info("Droplets deleted.")
