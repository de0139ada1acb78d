#!/usr/bin/env python3
"""
Startup script for the BananaStudio server
"""

import sys

from bananastudio.config import get_gemini_api_key, get_image_model, get_text_model, load_environment


def check_environment():
    """Check if environment is properly configured"""
    print("🔍 Checking environment...")

    if not load_environment():
        print("   Copy env.example to .env and add your GEMINI_API_KEY")

    if not get_gemini_api_key():
        print("❌ GEMINI_API_KEY (or GOOGLE_API_KEY) not found")
        return False

    print("✅ Gemini API key configured")
    print(f"   Text model:  {get_text_model()}")
    print(f"   Image model: {get_image_model()}")
    return True


def start_server():
    """Start the Flask server"""
    print("\n🚀 Starting BananaStudio...")
    print("=" * 50)

    from app import app

    host, port = app.config['HOST'], app.config['PORT']
    print("\n📡 Available endpoints:")
    print(f"   Web Interface: http://localhost:{port}")
    print(f"   API State:     http://localhost:{port}/api/v1/state")
    print(f"   API Health:    http://localhost:{port}/api/v1/health")
    print("\n" + "=" * 50)

    app.run(debug=app.config['DEBUG'], host=host, port=port, threaded=True)


def main():
    """Main startup function"""
    print("🎨 BananaStudio AI")
    print("=" * 50)

    if not check_environment():
        print("\n❌ Environment check failed. Please fix the issues above.")
        sys.exit(1)

    start_server()


if __name__ == "__main__":
    main()
