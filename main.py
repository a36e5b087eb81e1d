import sys
import logging

from storenav.viewer import StoreMapApp


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Optional layout file path as the first argument
    layout = None
    if len(sys.argv) > 1:
        from storenav.layout import load_layout

        layout = load_layout(sys.argv[1])
    StoreMapApp(layout=layout).run()


if __name__ == "__main__":
    main()
