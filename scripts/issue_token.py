"""개발/테스트용 bearer 토큰을 발급합니다. 운영 환경에서는 외부 인증 시스템이 발급합니다."""
import argparse
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from noticeboard.services.auth_service import create_access_token


def main():
    parser = argparse.ArgumentParser(description="Issue a bearer token for a username")
    parser.add_argument("username")
    parser.add_argument("--expires-minutes", type=int, default=None)
    args = parser.parse_args()
    print(create_access_token(args.username, expires_minutes=args.expires_minutes))


if __name__ == "__main__":
    main()
