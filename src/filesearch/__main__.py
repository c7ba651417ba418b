from filesearch.cli import main


raise SystemExit(main())
