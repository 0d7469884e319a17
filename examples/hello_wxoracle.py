import logging
import time

import wxoracle

OWNER = "ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM"


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    server = wxoracle.run(port=0, config=wxoracle.RegistryConfig(owner=OWNER), new_server=True)
    print(server.url)

    owner = server.client(OWNER)
    owner.authorize_provider("provider1")

    provider = owner.as_caller("provider1")
    ts = provider.submit("New York", 25, 10, 60, 15)
    print("submitted at", ts, provider.get("New York", ts))

    provider.submit("New York", 26, 5, 55, 20)
    print("latest", provider.get_latest("New York"))

    try:
        while True:
            time.sleep(3600)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
