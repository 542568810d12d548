"""Authorize SaferViewer once and write the token cache, without uploading anything."""

import sys
from functools import partial

from saferviewer.auth import AuthorizationFlow, CredentialStore
from saferviewer.errors import SaferViewerError
from saferviewer.logging_conf import configure_logging
from saferviewer.opener import open_target
from saferviewer.settings import Settings, load_client_config


def main() -> None:
    settings = Settings()
    configure_logging(settings)
    store = CredentialStore(settings)
    try:
        client_config = load_client_config(settings)
        flow = AuthorizationFlow(
            settings, client_config, store, opener=partial(open_target, command=settings.open_command)
        )
        flow.run()
    except SaferViewerError as e:
        raise SystemExit(f"Authorization failed: {e}")
    print(f"Wrote token: {store.path}", file=sys.stderr)


if __name__ == "__main__":
    main()
