"""Ví dụ: dùng service layer (không qua Flask).

In ra đường dẫn trả khách (nội dung mã QR) của một khách đã có trong CSDL.
"""

import importlib
import sys

from config import get_settings_module

from src.visitor_system.visitor_system.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        public_base_url=settings.PUBLIC_BASE_URL,
        upload_folder=settings.UPLOAD_FOLDER,
    )
    visitor_id = int(sys.argv[1]) if len(sys.argv) > 1 else 1
    token = container.visitor_service.get_card(visitor_id)
    print(token.url)


if __name__ == "__main__":
    main()
