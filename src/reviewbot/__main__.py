import sys

import uvicorn

from reviewbot.core.config import load_config
from reviewbot.core.errors import ConfigError


def main() -> None:
    try:
        cfg = load_config()
    except ConfigError as error:
        if error.missing:
            print("[ReviewBot] ❌ Missing required environment variables:")
            for name in error.missing:
                print(f"   - {name}")
        if error.invalid:
            print("[ReviewBot] ❌ Invalid values for environment variables:")
            for name in error.invalid:
                print(f"   - {name}")
        print("\nPlease check your .env file or environment configuration.")
        sys.exit(1)

    print(f"[ReviewBot] 🚀 Server running on port {cfg.port} ({cfg.environment})")
    print(f"[ReviewBot] 📍 Webhook URL: http://localhost:{cfg.port}/webhook")
    uvicorn.run(
        "reviewbot.github.webhooks.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=cfg.port,
        reload=cfg.environment == "development",
    )

if __name__ == "__main__":
    main()
