from .update_display import main

raise SystemExit(main())
