import os

print("⏳ [RUNNER] Importing pharmacy_registry.app...")
from pharmacy_registry.app import create_app
print("✅ [RUNNER] Import complete.")

if __name__ == "__main__":
    try:
        app = create_app()
        port = int(os.environ.get("PORT", 8080))
        print(f"🚀 [RUNNER] STARTING APP ON PORT {port}...")
        app.run(host="0.0.0.0", port=port, debug=True, use_reloader=False)
    except Exception as e:
        print(f"❌ [RUNNER] ERROR: {e}")
